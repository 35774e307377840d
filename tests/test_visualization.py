"""
可视化模块测试
测试画布几何、机器人外形渲染、迷宫线段和桌面查看器
"""

import math
import sys
import os
from types import SimpleNamespace
from unittest.mock import MagicMock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest

from mouse_viewer.maze.wall import Direction, Wall
from mouse_viewer.simulation.protocol import Pose
from mouse_viewer.visualization.geometry import GridGeometry
from mouse_viewer.visualization.pose_renderer import (
    robot_polygon, transform_polygon, robot_outline, pose_outline
)
from mouse_viewer.visualization.maze_renderer import maze_segments, wall_segment, border_segments


@pytest.fixture
def geometry():
    """4x4迷宫的默认布局：左下角(300, 300)，50像素/格，0.09米/格"""
    return GridGeometry.for_maze(4)


# ============================================================================
# GridGeometry Tests
# ============================================================================

def test_geometry_defaults(geometry):
    assert geometry.origin == (300, 300)
    assert geometry.square_width == 50
    assert geometry.size_px == 200
    assert geometry.ratio == pytest.approx(50 / 0.09)


def test_meters_to_pixels(geometry):
    """Y轴翻转：物理坐标向上，屏幕坐标向下"""
    px, py = geometry.meters_to_pixels(0.09, 0.09)
    assert px == pytest.approx(350)
    assert py == pytest.approx(250)


def test_contains(geometry):
    assert geometry.contains(300, 300)
    assert geometry.contains(400, 200)
    assert not geometry.contains(299, 250)
    assert not geometry.contains(350, 301)


# ============================================================================
# PoseRenderer Tests
# ============================================================================

def test_polygon_shape():
    polygon = robot_polygon(half_width=1, back_length=2, front_length=3, mid_offset=1.5)
    assert polygon.tolist() == [[-1, -2], [1, -2], [1, 1.5], [0, 3], [-1, 1.5]]


def test_heading_north_is_unrotated():
    """theta=π/2时不旋转，车头朝+y"""
    polygon = robot_polygon()
    world = transform_polygon(polygon, 1.0, 2.0, math.pi / 2)
    np.testing.assert_allclose(world, polygon + np.array([1.0, 2.0]), atol=1e-12)


def test_heading_east_points_right():
    """theta=0时车头朝+x"""
    world = transform_polygon(robot_polygon(front_length=0.05), 0.0, 0.0, 0.0)
    front = world[3]
    assert front[0] == pytest.approx(0.05)
    assert front[1] == pytest.approx(0.0, abs=1e-12)


def test_outline_is_closed_polygon(geometry):
    segments = robot_outline(0.045, 0.045, 1.0, geometry)
    assert len(segments) == 5
    for i in range(5):
        assert segments[i][1] == segments[(i + 1) % 5][0]


def test_outline_projection(geometry):
    """车头顶点从米换算到像素"""
    segments = robot_outline(0.045, 0.045, math.pi / 2, geometry)
    ratio = 50 / 0.09
    front = segments[3][0]
    assert front[0] == pytest.approx(300 + 0.045 * ratio)
    assert front[1] == pytest.approx(300 - (0.045 + 0.033) * ratio)
    # 第一个顶点是左后
    left_back = segments[0][0]
    assert left_back[0] == pytest.approx(300 + (0.045 - 0.019) * ratio)
    assert left_back[1] == pytest.approx(300 - (0.045 - 0.020) * ratio)


def test_pose_outline_uses_positions_only(geometry):
    pose = Pose.at(0.1, 0.2, 0.3)
    pose.x.v = 5.0
    pose.theta.a = 9.0
    assert pose_outline(pose, geometry) == robot_outline(0.1, 0.2, 0.3, geometry)


# ============================================================================
# MazeRenderer Tests
# ============================================================================

def test_border_segments(geometry):
    assert border_segments(geometry) == [
        ((300, 300), (500, 300)),
        ((300, 300), (300, 100)),
    ]


def test_wall_segments(geometry):
    assert wall_segment(Wall(0, 0, Direction.UP), geometry) == ((300, 250), (350, 250))
    assert wall_segment(Wall(0, 0, Direction.RIGHT), geometry) == ((350, 300), (350, 250))
    assert wall_segment(Wall(3, 3, Direction.UP), geometry) == ((450, 100), (500, 100))


def test_maze_segments_skip_out_of_range(geometry):
    walls = [Wall(1, 1, Direction.UP), Wall(4, 0, Direction.RIGHT)]
    segments = maze_segments(walls, geometry)
    assert len(segments) == 3
    assert segments[2] == ((350, 200), (400, 200))


# ============================================================================
# MazeVisualizer Tests
# ============================================================================

@pytest.fixture
def visualizer():
    from mouse_viewer.session import ViewerSession
    from mouse_viewer.simulation.client import SimulationClient
    from mouse_viewer.visualization.maze_visualizer import MazeVisualizer

    client = SimulationClient(session=MagicMock())
    vis = MazeVisualizer(ViewerSession(client=client), figsize=(4, 4))
    yield vis
    vis.close()


def test_visualizer_click_toggles_wall(visualizer):
    session = visualizer.session
    assert Wall(0, 0, Direction.RIGHT) in session.editor.walls

    event = SimpleNamespace(inaxes=visualizer.ax, button=1, xdata=348.0, ydata=275.0)
    visualizer._on_mouse_click(event)

    assert Wall(0, 0, Direction.RIGHT) not in session.editor.walls
    assert session.maze_string.split('\n')[7] == '|           |   |'
    assert len(visualizer.wall_lines.get_segments()) == len(session.wall_segments())


def test_visualizer_ignores_other_axes(visualizer):
    before = visualizer.session.maze_string
    event = SimpleNamespace(inaxes=None, button=1, xdata=348.0, ydata=275.0)
    visualizer._on_mouse_click(event)
    assert visualizer.session.maze_string == before


def test_visualizer_keys(visualizer):
    player = visualizer.session.player
    visualizer._on_key_press(SimpleNamespace(key='right'))
    assert player.state.speed == 2.0
    visualizer._on_key_press(SimpleNamespace(key='left'))
    visualizer._on_key_press(SimpleNamespace(key='left'))
    assert player.state.speed == 0.75

    visualizer._on_key_press(SimpleNamespace(key=' '))
    assert player.state.playing is True
    visualizer._on_key_press(SimpleNamespace(key=' '))
    assert player.state.playing is False


def test_visualizer_draws_robot(visualizer):
    visualizer.session.player.load([Pose.at(0.045, 0.045, math.pi / 2)])
    visualizer.redraw()
    assert len(visualizer.robot_lines.get_segments()) == 5

    visualizer._on_slider_change(100.0)
    assert len(visualizer.robot_lines.get_segments()) == 0
