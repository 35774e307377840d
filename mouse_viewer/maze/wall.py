"""
墙数据结构定义
迷宫以左下角格子为原点(0, 0)，每个格子只记录北侧(UP)和东侧(RIGHT)两面墙
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Set


class Direction(Enum):
    """墙所在的格子边"""
    UP = 'up'           # 北侧
    RIGHT = 'right'     # 东侧


@dataclass(frozen=True)
class Wall:
    """一段墙

    以(x, y, dir)作为值语义的唯一标识，两个坐标和方向相同的墙即为同一面墙。

    Attributes:
        x: 格子X坐标（从左往右，0开始）
        y: 格子Y坐标（从下往上，0开始）
        dir: 墙位于格子的哪一侧
    """
    x: int
    y: int
    dir: Direction

    def in_range(self, width: int) -> bool:
        """墙是否位于width×width的迷宫内"""
        return 0 <= self.x < width and 0 <= self.y < width

    def to_dict(self) -> dict:
        """转换为JSON格式 {"x": .., "y": .., "dir": "up"|"right"}"""
        return {'x': self.x, 'y': self.y, 'dir': self.dir.value}

    @classmethod
    def from_dict(cls, data: dict) -> 'Wall':
        """从JSON字典构造

        Raises:
            ValueError: 字段缺失、坐标为负或方向不是 up/right
        """
        try:
            x = data['x']
            y = data['y']
            direction = Direction(data['dir'])
        except KeyError as e:
            raise ValueError(f"墙数据缺少字段: {e}") from e
        if not isinstance(x, int) or not isinstance(y, int) or isinstance(x, bool) or isinstance(y, bool):
            raise ValueError(f"墙坐标必须是整数: {data}")
        if x < 0 or y < 0:
            raise ValueError(f"墙坐标不能为负: {data}")
        return cls(x, y, direction)


class WallSet:
    """墙集合

    无序、不重复的墙集合，编辑器和编解码器共用。
    内部直接用Wall作为集合的键（frozen dataclass自带__hash__/__eq__）。

    Example:
        >>> walls = WallSet()
        >>> walls.toggle(Wall(0, 0, Direction.UP))
        True
        >>> Wall(0, 0, Direction.UP) in walls
        True
    """

    def __init__(self, walls: Iterable[Wall] = ()):
        self._walls: Set[Wall] = set(walls)

    def add(self, wall: Wall):
        self._walls.add(wall)

    def remove(self, wall: Wall):
        """移除墙，不存在时抛出KeyError"""
        self._walls.remove(wall)

    def discard(self, wall: Wall):
        self._walls.discard(wall)

    def toggle(self, wall: Wall) -> bool:
        """存在则删除，不存在则插入

        Returns:
            切换后墙是否存在
        """
        if wall in self._walls:
            self._walls.remove(wall)
            return False
        self._walls.add(wall)
        return True

    def restricted(self, width: int) -> 'WallSet':
        """返回只保留 [0, width) 范围内墙的新集合"""
        return WallSet(w for w in self._walls if w.in_range(width))

    def copy(self) -> 'WallSet':
        return WallSet(self._walls)

    def to_list(self) -> List[dict]:
        """按(y, x, dir)排序后转换为JSON列表，便于比较和传输"""
        ordered = sorted(self._walls, key=lambda w: (w.y, w.x, w.dir.value))
        return [w.to_dict() for w in ordered]

    @classmethod
    def from_list(cls, items: Iterable[dict]) -> 'WallSet':
        return cls(Wall.from_dict(item) for item in items)

    def __contains__(self, wall) -> bool:
        return wall in self._walls

    def __iter__(self) -> Iterator[Wall]:
        return iter(self._walls)

    def __len__(self) -> int:
        return len(self._walls)

    def __eq__(self, other) -> bool:
        if isinstance(other, WallSet):
            return self._walls == other._walls
        if isinstance(other, (set, frozenset)):
            return self._walls == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"WallSet({len(self._walls)} walls)"
