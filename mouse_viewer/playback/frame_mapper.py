"""
进度条位置到帧序号的映射
"""

import math
from typing import Optional


def map_frame(scrub: float, frame_count: int) -> Optional[int]:
    """把进度（0~100）映射到帧序号

    Args:
        scrub: 进度条位置，0~100
        frame_count: 结果序列的帧数

    Returns:
        帧序号；没有当前帧（scrub==100 或 序列为空）时返回None
    """
    if frame_count <= 0:
        return None
    index = math.floor(scrub * frame_count / 100)
    if index >= frame_count or index < 0:
        return None
    return index
