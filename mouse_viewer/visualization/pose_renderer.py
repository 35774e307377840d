"""
机器人位姿渲染
把机器人外形多边形按位姿旋转、平移，再从米换算到屏幕像素
"""

from typing import List, Tuple

import numpy as np

import config

from .geometry import GridGeometry

Segment = Tuple[Tuple[float, float], Tuple[float, float]]


def robot_polygon(half_width: float = config.ROBOT_HALF_WIDTH,
                  back_length: float = config.ROBOT_BACK_LENGTH,
                  front_length: float = config.ROBOT_FRONT_LENGTH,
                  mid_offset: float = config.ROBOT_MID_OFFSET) -> np.ndarray:
    """机器人外形（局部坐标系，米，+y为前进方向）

    顶点顺序: 左后, 右后, 右中, 车头, 左中

    Returns:
        5x2 数组
    """
    return np.array([
        [-half_width, -back_length],
        [half_width, -back_length],
        [half_width, mid_offset],
        [0.0, front_length],
        [-half_width, mid_offset],
    ])


ROBOT_POLYGON = robot_polygon()


def transform_polygon(polygon: np.ndarray, x: float, y: float, theta: float) -> np.ndarray:
    """把局部多边形变换到世界坐标（米）

    局部+y是车头方向，所以旋转角是 theta - π/2，theta=π/2 时车头朝屏幕上方。
    """
    angle = theta - np.pi / 2
    c, s = np.cos(angle), np.sin(angle)
    rotation = np.array([[c, -s], [s, c]])
    return polygon @ rotation.T + np.array([x, y])


def project(points: np.ndarray, geometry: GridGeometry) -> np.ndarray:
    """世界坐标（米） -> 屏幕坐标（像素），屏幕Y轴向下"""
    ratio = geometry.ratio
    px = geometry.origin_x + points[:, 0] * ratio
    py = geometry.origin_y - points[:, 1] * ratio
    return np.column_stack([px, py])


def robot_outline(x: float, y: float, theta: float,
                  geometry: GridGeometry,
                  polygon: np.ndarray = ROBOT_POLYGON) -> List[Segment]:
    """计算机器人外形在屏幕上的线段

    Args:
        x, y: 机器人位置（米）
        theta: 航向角（弧度）
        geometry: 画布几何
        polygon: 局部外形多边形

    Returns:
        多边形每条边一段，首尾相接（5段）
    """
    pixels = project(transform_polygon(polygon, x, y, theta), geometry)
    n = len(pixels)
    return [
        ((float(pixels[i, 0]), float(pixels[i, 1])),
         (float(pixels[(i + 1) % n, 0]), float(pixels[(i + 1) % n, 1])))
        for i in range(n)
    ]


def pose_outline(pose, geometry: GridGeometry) -> List[Segment]:
    """按Pose对象（只用各轴的.x）计算外形线段"""
    return robot_outline(pose.x.x, pose.y.x, pose.theta.x, geometry)
