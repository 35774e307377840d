"""
画布网格几何
迷宫格子坐标、物理坐标（米）和屏幕像素坐标之间的换算
"""

from dataclasses import dataclass
from typing import Tuple

import config


@dataclass(frozen=True)
class GridGeometry:
    """迷宫在画布上的位置

    屏幕坐标系Y轴向下，迷宫坐标系Y轴向上，origin是迷宫左下角的屏幕坐标。

    Attributes:
        width: 迷宫边长（格数）
        origin_x: 左下角屏幕X坐标（像素）
        origin_y: 左下角屏幕Y坐标（像素）
        square_width: 格子边长（像素）
        square_width_m: 格子边长（米）
    """
    width: int
    origin_x: float
    origin_y: float
    square_width: float = config.SQUARE_WIDTH_PX
    square_width_m: float = config.SQUARE_WIDTH_M

    @classmethod
    def for_maze(cls, width: int,
                 square_width: float = config.SQUARE_WIDTH_PX,
                 origin_x: float = config.CANVAS_ORIGIN_X,
                 margin_top: float = config.CANVAS_MARGIN_TOP) -> 'GridGeometry':
        """按迷宫尺寸计算默认布局：顶部留margin_top，左侧固定在origin_x"""
        return cls(width=width,
                   origin_x=origin_x,
                   origin_y=margin_top + width * square_width,
                   square_width=square_width)

    @property
    def origin(self) -> Tuple[float, float]:
        return (self.origin_x, self.origin_y)

    @property
    def ratio(self) -> float:
        """像素/米"""
        return self.square_width / self.square_width_m

    @property
    def size_px(self) -> float:
        """迷宫边长（像素）"""
        return self.width * self.square_width

    def meters_to_pixels(self, mx: float, my: float) -> Tuple[float, float]:
        """物理坐标（米） -> 屏幕坐标（像素）"""
        return (self.origin_x + mx * self.ratio, self.origin_y - my * self.ratio)

    def cell_to_pixels(self, cx: float, cy: float) -> Tuple[float, float]:
        """格点坐标 -> 屏幕坐标（像素）"""
        return (self.origin_x + cx * self.square_width,
                self.origin_y - cy * self.square_width)

    def contains(self, px: float, py: float) -> bool:
        """屏幕坐标是否落在迷宫范围内"""
        return (self.origin_x <= px <= self.origin_x + self.size_px and
                self.origin_y - self.size_px <= py <= self.origin_y)
