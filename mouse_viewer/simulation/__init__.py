"""
仿真模块
仿真服务器的输入/输出数据结构和HTTP客户端
"""

from .protocol import (
    AxisState, Pose, Node, NodeDirection,
    SimulatorConfig, SimulatorState, SimulatorInput,
    DEFAULT_MAZE_STRING, parse_results
)
from .client import SimulationClient, SimulationRunner, SimulationError

__all__ = [
    'AxisState',
    'Pose',
    'Node',
    'NodeDirection',
    'SimulatorConfig',
    'SimulatorState',
    'SimulatorInput',
    'DEFAULT_MAZE_STRING',
    'parse_results',
    'SimulationClient',
    'SimulationRunner',
    'SimulationError',
]
