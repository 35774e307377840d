"""
可视化模块
画布几何、迷宫和机器人的线段渲染；
桌面(matplotlib)和Web(Flask)查看器按需单独导入
"""

from .geometry import GridGeometry
from .pose_renderer import robot_polygon, robot_outline, pose_outline
from .maze_renderer import maze_segments, wall_segment, border_segments

__all__ = [
    'GridGeometry',
    'robot_polygon',
    'robot_outline',
    'pose_outline',
    'maze_segments',
    'wall_segment',
    'border_segments',
]
