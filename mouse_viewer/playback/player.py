"""
轨迹回放器
持有仿真结果序列和回放状态，供时钟线程和界面线程共同使用
"""

import logging
import threading
from typing import Callable, List, Optional, Sequence

import config

from .state import PlaybackState
from ..simulation.protocol import Pose

logger = logging.getLogger(__name__)


class TrajectoryPlayer:
    """轨迹回放器

    时钟每拍调用tick()推进进度，界面通过play/stop/scrub_to等控制回放，
    两边的修改都在同一把锁内完成。

    Example:
        >>> player = TrajectoryPlayer()
        >>> player.load(results)
        >>> player.play()
        >>> with PlaybackClock(player.tick):
        ...     pose = player.current_pose()
    """

    def __init__(self, state: Optional[PlaybackState] = None,
                 tick_ms: float = config.PLAYBACK_TICK_MS):
        self.state = state or PlaybackState()
        self.tick_ms = tick_ms
        self.results: Sequence[Pose] = ()

        # 每次tick或控制操作后调用，参数为当前帧序号
        self.on_update: Optional[Callable[[Optional[int]], None]] = None

        self._lock = threading.RLock()

    @property
    def frame_count(self) -> int:
        return len(self.results)

    def load(self, results: List[Pose]):
        """整体替换结果序列，进度回到0"""
        with self._lock:
            self.results = tuple(results)
            self.state.reset()
        logger.info(f"载入结果序列: {len(results)}帧")
        self._notify()

    def clear(self):
        """清空结果序列"""
        self.load([])

    # ------------------------------------------------------------------
    # 时钟
    # ------------------------------------------------------------------

    def tick(self):
        """时钟回调"""
        with self._lock:
            if not self.state.playing:
                return
            self.state.tick(self.frame_count, self.tick_ms)
        self._notify()

    # ------------------------------------------------------------------
    # 播放控制
    # ------------------------------------------------------------------

    def play(self):
        with self._lock:
            self.state.play()
        self._notify()

    def stop(self):
        with self._lock:
            self.state.stop()
        self._notify()

    def toggle_play(self):
        with self._lock:
            if self.state.playing:
                self.state.stop()
            else:
                self.state.play()
        self._notify()

    def reset(self):
        with self._lock:
            self.state.reset()
        self._notify()

    def scrub_to(self, value: float):
        with self._lock:
            self.state.scrub_to(value)
        self._notify()

    def speed_up(self) -> float:
        with self._lock:
            speed = self.state.speed_up()
        self._notify()
        return speed

    def speed_down(self) -> float:
        with self._lock:
            speed = self.state.speed_down()
        self._notify()
        return speed

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def current_index(self) -> Optional[int]:
        with self._lock:
            return self.state.frame_index(self.frame_count)

    def current_pose(self) -> Optional[Pose]:
        """当前帧的位姿，没有当前帧时返回None"""
        with self._lock:
            index = self.state.frame_index(self.frame_count)
            if index is None:
                return None
            return self.results[index]

    def snapshot(self) -> dict:
        """回放状态快照（用于界面/接口）"""
        with self._lock:
            data = self.state.to_dict()
            data['frame_count'] = self.frame_count
            data['frame_index'] = self.state.frame_index(self.frame_count)
            return data

    def _notify(self):
        if self.on_update:
            self.on_update(self.current_index())
