"""
迷宫墙渲染
把墙集合转换为屏幕坐标下的线段
"""

from typing import Iterable, List

from .geometry import GridGeometry
from .pose_renderer import Segment
from ..maze.wall import Direction, Wall


def border_segments(geometry: GridGeometry) -> List[Segment]:
    """左侧和下侧外框（墙集合里不存这两条，始终绘制）"""
    ox, oy = geometry.origin
    size = geometry.size_px
    return [
        ((ox, oy), (ox + size, oy)),
        ((ox, oy), (ox, oy - size)),
    ]


def wall_segment(wall: Wall, geometry: GridGeometry) -> Segment:
    """单面墙的线段"""
    if wall.dir is Direction.UP:
        return (geometry.cell_to_pixels(wall.x, wall.y + 1),
                geometry.cell_to_pixels(wall.x + 1, wall.y + 1))
    return (geometry.cell_to_pixels(wall.x + 1, wall.y),
            geometry.cell_to_pixels(wall.x + 1, wall.y + 1))


def maze_segments(walls: Iterable[Wall], geometry: GridGeometry) -> List[Segment]:
    """整个迷宫的线段：外框 + 范围内的每一面墙"""
    segments = border_segments(geometry)
    for wall in walls:
        if wall.in_range(geometry.width):
            segments.append(wall_segment(wall, geometry))
    return segments
