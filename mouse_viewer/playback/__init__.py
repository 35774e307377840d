"""
回放模块
进度到帧序号的映射、回放状态、周期时钟和轨迹回放器
"""

from .frame_mapper import map_frame
from .state import PlaybackState
from .clock import PlaybackClock
from .player import TrajectoryPlayer

__all__ = ['map_frame', 'PlaybackState', 'PlaybackClock', 'TrajectoryPlayer']
