"""
迷宫文本编解码模块
在ASCII迷宫文本和墙集合之间相互转换

文本格式（以1×1迷宫为例）:
    +---+
    |   |
    +---+
偶数行为横墙行（每4列一个 "+---" 或 "+   "），奇数行为竖墙行（"|" 开头，
之后每4列一个 "   |" 或 "    "），最后一行是封闭的外框。
"""

import logging
from pathlib import Path
from typing import Tuple

from .wall import Direction, Wall, WallSet

logger = logging.getLogger(__name__)

CELL_PERIOD = 4     # 每个格子在文本中占4个字符


def decode(text: str) -> Tuple[WallSet, int]:
    """解析迷宫文本

    对格式错误的文本不会抛异常：长度不对的行只是匹配不到字符，不产生墙；
    过长的行产生的越界墙直接忽略。

    Args:
        text: 以 \\n 分隔的迷宫文本

    Returns:
        (walls, width): 墙集合和迷宫边长（格数）
    """
    walls = WallSet()
    lines = text.split('\n')
    width = len(lines) // 2

    for i, line in enumerate(lines):
        # 最后一行外框不携带墙信息
        if i >= 2 * width:
            break
        line = line.rstrip('\r')
        y = width - i // 2 - 1
        for j, char in enumerate(line):
            if i % 2 == 0:
                if j % CELL_PERIOD == 1 and char == '-':
                    wall = Wall(j // CELL_PERIOD, y, Direction.UP)
                else:
                    continue
            else:
                if j > 0 and j % CELL_PERIOD == 0 and char == '|':
                    wall = Wall(j // CELL_PERIOD - 1, y, Direction.RIGHT)
                else:
                    continue
            if wall.in_range(width):
                walls.add(wall)

    return walls, width


def encode(walls: WallSet, width: int) -> str:
    """把墙集合转换为规范的迷宫文本

    超出 [0, width) 范围的墙直接丢弃（编辑边界附近时可能产生这种墙）。

    Args:
        walls: 墙集合
        width: 迷宫边长（格数）

    Returns:
        迷宫文本，行之间用 \\n 连接，末尾没有换行
    """
    up = [[False] * width for _ in range(width)]
    right = [[False] * width for _ in range(width)]

    dropped = 0
    for wall in walls:
        if not wall.in_range(width):
            dropped += 1
            continue
        if wall.dir is Direction.UP:
            up[wall.y][wall.x] = True
        else:
            right[wall.y][wall.x] = True

    if dropped:
        logger.debug(f"编码时丢弃了{dropped}面越界的墙 (width={width})")

    lines = []
    for y in reversed(range(width)):
        lines.append(''.join('+---' if up[y][x] else '+   ' for x in range(width)) + '+')
        lines.append('|' + ''.join('   |' if right[y][x] else '    ' for x in range(width)))
    lines.append('+---' * width + '+')

    return '\n'.join(lines)


def canonicalize(text: str) -> str:
    """解析后重新编码，得到规范文本"""
    walls, width = decode(text)
    return encode(walls, width)


def shape_maze_string(text: str, size: int) -> str:
    """把小迷宫嵌入到 size×size 的棋盘中（左下角对齐）

    上方缺的行用全墙行补齐，每行右侧补 "---+"（横墙行）或 "   |"（竖墙行）。
    仿真器只接受固定尺寸的迷宫，发送前用它补齐。

    Args:
        text: 迷宫文本
        size: 棋盘边长（格数）

    Returns:
        2*size+1 行的迷宫文本，每行以 \\n 结尾

    Raises:
        ValueError: 迷宫比棋盘大
    """
    lines = [line.rstrip('\r') for line in text.splitlines()]
    total = 2 * size + 1
    if len(lines) > total:
        raise ValueError(f"迷宫有{len(lines)}行，超过了{size}x{size}棋盘的{total}行")

    width = len(lines) // 2
    missing = total - len(lines)
    res = []
    for i in range(total):
        if i >= missing:
            line = lines[i - missing]
            # 行号奇偶性与棋盘对齐
            if (i - missing) % 2 == 0:
                res.append(line + '---+' * (size - width))
            else:
                res.append(line + '   |' * (size - width))
        elif i % 2 == 0:
            res.append('+---' * size + '+')
        else:
            res.append('|   ' * size + '|')
    return ''.join(line + '\n' for line in res)


def maze_from_file(path) -> Tuple[WallSet, int]:
    """从文本文件读取迷宫"""
    text = Path(path).read_text(encoding='utf-8')
    walls, width = decode(text.rstrip('\n'))
    logger.info(f"已读取迷宫: {path} ({width}x{width}, {len(walls)}面墙)")
    return walls, width


def maze_to_file(path, walls: WallSet, width: int):
    """把迷宫写入文本文件（规范格式，末尾带换行）"""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(encode(walls, width) + '\n', encoding='utf-8')
    logger.info(f"迷宫已保存: {path}")
