"""
迷宫模块单元测试
测试墙集合、迷宫文本编解码和点击编辑
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from mouse_viewer.maze.wall import Direction, Wall, WallSet
from mouse_viewer.maze.codec import (
    decode, encode, canonicalize, shape_maze_string, maze_from_file, maze_to_file
)
from mouse_viewer.maze.editor import WallEditor, resolve
from mouse_viewer.simulation.protocol import DEFAULT_MAZE_STRING
from mouse_viewer.visualization.geometry import GridGeometry

UP = Direction.UP
RIGHT = Direction.RIGHT

SINGLE_CELL = "+---+\n|   |\n+---+"

DEFAULT_WALLS = {
    # 第一行（最上面）
    Wall(0, 3, UP), Wall(1, 3, UP), Wall(2, 3, UP), Wall(3, 3, UP),
    Wall(3, 3, RIGHT),
    Wall(1, 2, UP), Wall(2, 2, UP),
    Wall(0, 2, RIGHT), Wall(2, 2, RIGHT), Wall(3, 2, RIGHT),
    Wall(0, 1, RIGHT), Wall(1, 1, RIGHT), Wall(3, 1, RIGHT),
    Wall(2, 0, UP),
    Wall(0, 0, RIGHT), Wall(2, 0, RIGHT), Wall(3, 0, RIGHT),
}


# ============================================================================
# WallSet Tests
# ============================================================================

class TestWallSet:
    """墙集合测试"""

    def test_walls_are_value_equal(self):
        """坐标和方向相同的墙是同一面墙"""
        assert Wall(1, 2, UP) == Wall(1, 2, UP)
        assert Wall(1, 2, UP) != Wall(1, 2, RIGHT)
        assert len({Wall(1, 2, UP), Wall(1, 2, UP)}) == 1

    def test_no_duplicates(self):
        walls = WallSet([Wall(0, 0, UP), Wall(0, 0, UP), Wall(0, 0, RIGHT)])
        assert len(walls) == 2

    def test_toggle_symmetry(self):
        """切换两次恢复原状"""
        walls = WallSet(DEFAULT_WALLS)
        original = walls.copy()
        wall = Wall(1, 1, UP)
        assert wall not in walls

        assert walls.toggle(wall) is True
        assert wall in walls
        assert walls.toggle(wall) is False
        assert walls == original

    def test_restricted(self):
        walls = WallSet([Wall(0, 0, UP), Wall(4, 0, UP), Wall(0, 7, RIGHT)])
        assert walls.restricted(4) == {Wall(0, 0, UP)}

    def test_json_shape(self):
        wall = Wall(3, 1, RIGHT)
        assert wall.to_dict() == {'x': 3, 'y': 1, 'dir': 'right'}
        assert Wall.from_dict({'x': 3, 'y': 1, 'dir': 'right'}) == wall

        walls = WallSet([Wall(1, 0, UP), Wall(0, 0, RIGHT)])
        assert WallSet.from_list(walls.to_list()) == walls

    def test_json_invalid(self):
        with pytest.raises(ValueError):
            Wall.from_dict({'x': 0, 'y': 0, 'dir': 'left'})
        with pytest.raises(ValueError):
            Wall.from_dict({'x': 0, 'dir': 'up'})
        with pytest.raises(ValueError):
            Wall.from_dict({'x': '0', 'y': 0, 'dir': 'up'})

    def test_json_negative_coordinates(self):
        """坐标必须非负"""
        with pytest.raises(ValueError):
            Wall.from_dict({'x': -1, 'y': 0, 'dir': 'up'})
        with pytest.raises(ValueError):
            Wall.from_dict({'x': 0, 'y': -2, 'dir': 'right'})


# ============================================================================
# Codec Tests
# ============================================================================

class TestDecode:
    """迷宫文本解析测试"""

    def test_empty(self):
        walls, width = decode("")
        assert width == 0
        assert len(walls) == 0

    def test_single_line(self):
        walls, width = decode("+---+")
        assert width == 0
        assert len(walls) == 0

    def test_single_cell(self):
        """1x1迷宫：上墙和右墙，左/下外框不单独存储"""
        walls, width = decode(SINGLE_CELL)
        assert width == 1
        assert walls == {Wall(0, 0, UP), Wall(0, 0, RIGHT)}

    def test_default_maze(self):
        walls, width = decode(DEFAULT_MAZE_STRING)
        assert width == 4
        assert walls == DEFAULT_WALLS

    def test_bottom_left_origin(self):
        """文本第一行是最上面（北侧）"""
        text = "+   +   +\n|       |\n+   +   +\n|       |\n+---+---+"
        walls, width = decode(text)
        assert width == 2
        assert walls == {Wall(1, 1, RIGHT), Wall(1, 0, RIGHT)}

    def test_trailing_border_row_ignored(self):
        """最后一行外框不产生墙"""
        text = "+   +\n|    \n+---+"
        walls, width = decode(text)
        assert width == 1
        assert len(walls) == 0

    def test_malformed_rows_tolerated(self):
        """长度不对的行不报错，只是匹配不到"""
        text = "+-\n|\n+---+---+---+\nxyz"
        walls, width = decode(text)
        assert width == 2
        assert Wall(0, 1, UP) in walls
        for wall in walls:
            assert wall.dir is UP

    def test_long_rows_ignored_out_of_range(self):
        text = "+---+---+\n|   |   |\n+---+"
        walls, width = decode(text)
        assert width == 1
        assert walls == {Wall(0, 0, UP), Wall(0, 0, RIGHT)}

    def test_crlf(self):
        walls, width = decode(SINGLE_CELL.replace('\n', '\r\n'))
        assert width == 1
        assert walls == {Wall(0, 0, UP), Wall(0, 0, RIGHT)}


class TestEncode:
    """迷宫文本生成测试"""

    def test_single_cell(self):
        walls = WallSet([Wall(0, 0, UP), Wall(0, 0, RIGHT)])
        assert encode(walls, 1) == SINGLE_CELL

    def test_empty_cell(self):
        assert encode(WallSet(), 1) == "+   +\n|    \n+---+"

    def test_default_maze_is_canonical(self):
        walls, width = decode(DEFAULT_MAZE_STRING)
        assert encode(walls, width) == DEFAULT_MAZE_STRING

    def test_out_of_range_dropped(self):
        walls = WallSet([Wall(0, 0, UP), Wall(1, 0, UP), Wall(0, 5, RIGHT)])
        assert encode(walls, 1) == encode(WallSet([Wall(0, 0, UP)]), 1)

    def test_row_length(self):
        text = encode(WallSet(), 3)
        lines = text.split('\n')
        assert len(lines) == 7
        assert all(len(line) == 13 for line in lines)

    def test_round_trip(self):
        """decode(encode(W, n)) == W限制在[0,n)内"""
        walls = WallSet(DEFAULT_WALLS | {Wall(4, 0, UP), Wall(1, 9, RIGHT)})
        decoded, width = decode(encode(walls, 4))
        assert width == 4
        assert decoded == walls.restricted(4)

    def test_canonical_fixed_point(self):
        """规范文本再编码一次保持不变"""
        walls = WallSet([Wall(0, 0, UP), Wall(2, 1, RIGHT), Wall(1, 2, UP), Wall(3, 3, UP)])
        text = encode(walls, 3)
        assert encode(*decode(text)) == text

    def test_canonicalize_whitespace(self):
        """行尾空格不同，规范化后相同"""
        messy = "+---+\n|   |   \n+---+"
        assert canonicalize(messy) == SINGLE_CELL


class TestShapeMazeString:
    """迷宫补齐测试"""

    def test_embed_bottom_left(self):
        shaped = shape_maze_string(SINGLE_CELL, 2)
        assert shaped == (
            "+---+---+\n"
            "|   |   |\n"
            "+---+---+\n"
            "|   |   |\n"
            "+---+---+\n"
        )

    def test_original_walls_kept(self):
        text = encode(WallSet([Wall(0, 0, UP)]), 2)
        walls, width = decode(shape_maze_string(text, 4).rstrip('\n'))
        assert width == 4
        assert Wall(0, 0, UP) in walls
        # 原迷宫内没有的墙仍然没有
        assert Wall(1, 0, UP) not in walls
        assert Wall(0, 0, RIGHT) not in walls
        # 补齐的区域全是墙
        assert Wall(3, 3, UP) in walls
        assert Wall(2, 0, RIGHT) in walls

    def test_same_size(self):
        assert shape_maze_string(DEFAULT_MAZE_STRING, 4) == DEFAULT_MAZE_STRING + '\n'

    def test_too_large(self):
        with pytest.raises(ValueError):
            shape_maze_string(DEFAULT_MAZE_STRING, 2)


def test_file_round_trip(tmp_path):
    """迷宫文本文件读写"""
    walls, width = decode(DEFAULT_MAZE_STRING)
    path = tmp_path / 'mazes' / 'default.txt'
    maze_to_file(path, walls, width)

    loaded, loaded_width = maze_from_file(path)
    assert loaded_width == width
    assert loaded == walls


# ============================================================================
# Resolver Tests
# ============================================================================

# 2x2迷宫，左下角在屏幕(0, 100)，每格50像素
ORIGIN = (0.0, 100.0)
SW = 50.0


def click(local_x, local_y):
    """迷宫局部坐标 -> 屏幕坐标"""
    return ORIGIN[0] + local_x, ORIGIN[1] - local_y


class TestResolve:
    """点击位置到墙的映射测试"""

    def test_center_picks_left(self):
        """格子正中心四边距离相同，取left -> 左边格子的右墙"""
        assert resolve(*click(75, 25), ORIGIN, SW) == Wall(0, 0, RIGHT)
        assert resolve(*click(75, 75), ORIGIN, SW) == Wall(0, 1, RIGHT)

    def test_center_of_first_column_is_noop(self):
        assert resolve(*click(25, 25), ORIGIN, SW) is None
        assert resolve(*click(25, 75), ORIGIN, SW) is None

    def test_deterministic(self):
        results = {resolve(*click(75, 25), ORIGIN, SW) for _ in range(20)}
        assert results == {Wall(0, 0, RIGHT)}

    def test_right_edge(self):
        assert resolve(*click(48, 25), ORIGIN, SW) == Wall(0, 0, RIGHT)

    def test_top_edge(self):
        assert resolve(*click(25, 48), ORIGIN, SW) == Wall(0, 0, UP)

    def test_bottom_edge(self):
        """下边 -> 下方格子的上墙"""
        assert resolve(*click(25, 52), ORIGIN, SW) == Wall(0, 0, UP)

    def test_outer_bottom_is_noop(self):
        assert resolve(*click(75, 2), ORIGIN, SW) is None

    def test_outer_left_is_noop(self):
        assert resolve(*click(2, 75), ORIGIN, SW) is None

    def test_tie_right_before_top(self):
        assert resolve(*click(40, 40), ORIGIN, SW) == Wall(0, 0, RIGHT)

    def test_tie_left_before_bottom(self):
        assert resolve(*click(60, 60), ORIGIN, SW) == Wall(0, 1, RIGHT)

    def test_degenerate_geometry(self):
        assert resolve(10, 10, ORIGIN, 0) is None
        assert resolve(10, 10, ORIGIN, -5) is None


class TestWallEditor:
    """墙编辑器测试"""

    def setup_method(self):
        """测试前准备"""
        self.changes = []
        geometry = GridGeometry(width=2, origin_x=ORIGIN[0], origin_y=ORIGIN[1], square_width=SW)
        self.editor = WallEditor(WallSet(), 2, geometry, on_change=self.changes.append)

    def test_click_toggles_and_emits(self):
        wall = self.editor.click(*click(48, 25))
        assert wall == Wall(0, 0, RIGHT)
        assert wall in self.editor.walls
        assert len(self.changes) == 1
        assert decode(self.changes[0]) == (WallSet([wall]), 2)

    def test_double_click_restores(self):
        self.editor.click(*click(25, 48))
        self.editor.click(*click(25, 48))
        assert len(self.editor.walls) == 0
        assert self.changes[-1] == encode(WallSet(), 2)

    def test_noop_click(self):
        assert self.editor.click(*click(25, 25)) is None
        assert self.changes == []

    def test_outer_right_border_is_editable(self):
        wall = self.editor.click(*click(98, 25))
        assert wall == Wall(1, 0, RIGHT)
        assert decode(self.changes[-1])[0] == {Wall(1, 0, RIGHT)}

    def test_out_of_range_click_is_noop(self):
        """落在网格外的墙不切换，墙集合与文本保持一致"""
        assert self.editor.click(*click(140, 25)) is None
        assert len(self.editor.walls) == 0
        assert self.changes == []

    def test_top_right_corner_click(self):
        """右上角顶点解析到 (width-1, width, RIGHT)，不在网格内"""
        assert self.editor.click(*click(100, 100)) is None
        assert self.editor.walls == decode(self.editor.maze_string)[0]
        assert self.changes == []

    def test_toggle_out_of_range_keeps_walls(self):
        text = self.editor.toggle(Wall(1, 2, RIGHT))
        assert text == encode(WallSet(), 2)
        assert len(self.editor.walls) == 0
        assert self.changes == []

    def test_load(self):
        self.editor.load(DEFAULT_MAZE_STRING)
        assert self.editor.width == 4
        assert self.editor.walls == DEFAULT_WALLS
        assert self.editor.geometry.origin_y == 100 + 4 * self.editor.geometry.square_width
        assert self.editor.maze_string == DEFAULT_MAZE_STRING
