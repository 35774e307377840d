"""
迷宫墙编辑模块
把鼠标点击位置映射到最近的一段墙，并切换它的有无
"""

import logging
import math
from typing import Callable, Optional, Tuple

from .codec import decode, encode
from .wall import Direction, Wall, WallSet
from ..visualization.geometry import GridGeometry

logger = logging.getLogger(__name__)

# 候选边的顺序即平局时的优先级
EDGE_ORDER = ('left', 'right', 'bottom', 'top')


def resolve(click_x: float, click_y: float,
            origin: Tuple[float, float],
            square_width: float) -> Optional[Wall]:
    """找到离点击位置最近的墙

    纯几何计算，不依赖任何画布。到四条边距离相同时按
    left, right, bottom, top 的顺序取第一个。

    Args:
        click_x: 点击的屏幕X坐标（像素）
        click_y: 点击的屏幕Y坐标（像素，向下为正）
        origin: 迷宫左下角的屏幕坐标
        square_width: 格子边长（像素）

    Returns:
        最近的墙；点到外框左侧/下侧或几何参数无效时返回None
    """
    if not square_width > 0:
        return None

    x = click_x - origin[0]
    y = origin[1] - click_y

    xquo = math.floor(x / square_width)
    yquo = math.floor(y / square_width)
    xrem = x - xquo * square_width
    yrem = y - yquo * square_width

    distances = [
        ('left', xrem),
        ('right', square_width - xrem),
        ('bottom', yrem),
        ('top', square_width - yrem),
    ]
    # sorted是稳定排序，相等时保持EDGE_ORDER
    edge = sorted(distances, key=lambda d: d[1])[0][0]

    if edge == 'right':
        return Wall(xquo, yquo, Direction.RIGHT)
    if edge == 'top':
        return Wall(xquo, yquo, Direction.UP)
    if edge == 'left':
        if xquo == 0:
            return None
        return Wall(xquo - 1, yquo, Direction.RIGHT)
    # bottom
    if yquo == 0:
        return None
    return Wall(xquo, yquo - 1, Direction.UP)


class WallEditor:
    """迷宫墙编辑器

    持有当前迷宫的墙集合，点击后切换墙并把新的迷宫文本通知给外部。

    Example:
        >>> editor = WallEditor.from_text(maze_text, on_change=print)
        >>> editor.click(325, 275)
    """

    def __init__(self, walls: WallSet, width: int,
                 geometry: Optional[GridGeometry] = None,
                 on_change: Optional[Callable[[str], None]] = None):
        """初始化编辑器

        Args:
            walls: 初始墙集合（编辑器会复制一份）
            width: 迷宫边长（格数）
            geometry: 画布几何，None则按默认布局计算
            on_change: 迷宫文本变化时的回调
        """
        self.walls = walls.copy()
        self.width = width
        self.geometry = geometry or GridGeometry.for_maze(width)
        self.on_change = on_change

    @classmethod
    def from_text(cls, text: str, geometry: Optional[GridGeometry] = None,
                  on_change: Optional[Callable[[str], None]] = None) -> 'WallEditor':
        walls, width = decode(text)
        return cls(walls, width, geometry, on_change)

    @property
    def maze_string(self) -> str:
        """当前迷宫的规范文本"""
        return encode(self.walls, self.width)

    def load(self, text: str):
        """载入新的迷宫文本，重新计算画布布局"""
        self.walls, self.width = decode(text)
        self.geometry = GridGeometry.for_maze(
            self.width,
            square_width=self.geometry.square_width,
            origin_x=self.geometry.origin_x,
        )
        logger.info(f"载入迷宫: {self.width}x{self.width}, {len(self.walls)}面墙")

    def resolve(self, click_x: float, click_y: float) -> Optional[Wall]:
        return resolve(click_x, click_y, self.geometry.origin, self.geometry.square_width)

    def toggle(self, wall: Wall) -> str:
        """切换一面墙，返回新的迷宫文本

        网格外的墙不会进入墙集合，保证walls与decode(maze_string)一致。
        """
        if not wall.in_range(self.width):
            logger.debug(f"忽略网格外的墙: ({wall.x}, {wall.y}, {wall.dir.value})")
            return encode(self.walls, self.width)
        present = self.walls.toggle(wall)
        logger.debug(f"{'添加' if present else '移除'}墙: ({wall.x}, {wall.y}, {wall.dir.value})")
        text = encode(self.walls, self.width)
        if self.on_change:
            self.on_change(text)
        return text

    def click(self, click_x: float, click_y: float) -> Optional[Wall]:
        """处理一次点击

        Returns:
            被切换的墙，没有命中或命中网格外时返回None（不做任何修改）
        """
        wall = self.resolve(click_x, click_y)
        if wall is None or not wall.in_range(self.width):
            return None
        self.toggle(wall)
        return wall
