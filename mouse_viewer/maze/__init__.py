"""
迷宫模块
包含墙数据结构、迷宫文本编解码和点击编辑
"""

from .wall import Direction, Wall, WallSet
from .codec import decode, encode, canonicalize, shape_maze_string, maze_from_file, maze_to_file
from .editor import WallEditor, resolve

__all__ = [
    'Direction',
    'Wall',
    'WallSet',
    'decode',
    'encode',
    'canonicalize',
    'shape_maze_string',
    'maze_from_file',
    'maze_to_file',
    'WallEditor',
    'resolve',
]
