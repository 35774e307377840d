"""
回放状态
进度条位置、播放/暂停、倍速，以及时钟每一拍的推进规则
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

import config

from .frame_mapper import map_frame

SCRUB_MIN = 0.0
SCRUB_MAX = 100.0


@dataclass
class PlaybackState:
    """回放状态

    Attributes:
        scrub: 进度条位置（0~100）
        playing: 是否正在播放
        speed_index: 倍速表索引
        speeds: 倍速表
    """
    scrub: float = SCRUB_MIN
    playing: bool = False
    speed_index: int = config.PLAYBACK_DEFAULT_SPEED_INDEX
    speeds: Tuple[float, ...] = field(default=config.PLAYBACK_SPEEDS)

    def __post_init__(self):
        if not self.speeds:
            raise ValueError("倍速表不能为空")
        self.speed_index = min(max(self.speed_index, 0), len(self.speeds) - 1)
        self.scrub = _clamp(self.scrub)

    @property
    def speed(self) -> float:
        """当前倍速"""
        return self.speeds[self.speed_index]

    # ------------------------------------------------------------------
    # 播放控制
    # ------------------------------------------------------------------

    def play(self):
        self.playing = True

    def stop(self):
        self.playing = False

    def reset(self):
        """回到开头，不改变播放状态"""
        self.scrub = SCRUB_MIN

    def scrub_to(self, value: float):
        """手动拖动进度条"""
        self.scrub = _clamp(value)

    def speed_up(self) -> float:
        """加速一档，已到最快则保持不变"""
        if self.speed_index + 1 < len(self.speeds):
            self.speed_index += 1
        return self.speed

    def speed_down(self) -> float:
        """减速一档，已到最慢则保持不变"""
        if self.speed_index > 0:
            self.speed_index -= 1
        return self.speed

    # ------------------------------------------------------------------
    # 时钟推进
    # ------------------------------------------------------------------

    def tick(self, frame_count: int, tick_ms: float = config.PLAYBACK_TICK_MS) -> float:
        """时钟走一拍

        每拍前进 tick_ms 个仿真周期（乘以倍速），到100后停在100，
        但不会自动把playing置为False。

        Args:
            frame_count: 结果序列的帧数，为0时不推进
            tick_ms: 时钟周期（毫秒）

        Returns:
            推进后的scrub
        """
        if self.playing and frame_count > 0:
            step = (SCRUB_MAX / frame_count) * tick_ms * self.speed
            self.scrub = min(self.scrub + step, SCRUB_MAX)
        return self.scrub

    def frame_index(self, frame_count: int) -> Optional[int]:
        """当前帧序号"""
        return map_frame(self.scrub, frame_count)

    def to_dict(self) -> dict:
        return {
            'scrub': self.scrub,
            'playing': self.playing,
            'speed_index': self.speed_index,
            'speed': self.speed,
        }


def _clamp(value: float) -> float:
    return min(max(float(value), SCRUB_MIN), SCRUB_MAX)
