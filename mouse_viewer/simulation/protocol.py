"""
仿真器协议数据类定义
定义发送给仿真服务器的输入和服务器返回的结果序列
"""

import math
from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Any, List

import config


class NodeDirection(Enum):
    """迷宫节点朝向（8方向）"""
    NORTH = 'North'
    NORTH_EAST = 'NorthEast'
    EAST = 'East'
    SOUTH_EAST = 'SouthEast'
    SOUTH = 'South'
    SOUTH_WEST = 'SouthWest'
    WEST = 'West'
    NORTH_WEST = 'NorthWest'


@dataclass
class AxisState:
    """单轴运动状态

    Attributes:
        x: 位置（米或弧度）
        v: 速度
        a: 加速度
        j: 加加速度
    """
    x: float = 0.0
    v: float = 0.0
    a: float = 0.0
    j: float = 0.0

    @classmethod
    def from_dict(cls, data: Any, name: str = 'axis') -> 'AxisState':
        """解析单轴状态，缺少的v/a/j按0处理，x必须存在"""
        if not isinstance(data, dict) or 'x' not in data:
            raise ValueError(f"{name} 必须是包含x字段的对象: {data!r}")
        values = {}
        for key in ('x', 'v', 'a', 'j'):
            if key in data:
                values[key] = _number(data[key], f"{name}.{key}")
        return cls(**values)


@dataclass
class Pose:
    """机器人位姿（x, y, theta三轴状态）

    渲染只用到每个轴的位置字段(.x)。
    """
    x: AxisState = field(default_factory=AxisState)
    y: AxisState = field(default_factory=AxisState)
    theta: AxisState = field(default_factory=AxisState)

    @classmethod
    def at(cls, x: float, y: float, theta: float) -> 'Pose':
        """只指定位置的位姿"""
        return cls(AxisState(x), AxisState(y), AxisState(theta))

    @property
    def position(self):
        """(x, y, theta) 位置三元组（米，米，弧度）"""
        return (self.x.x, self.y.x, self.theta.x)

    @classmethod
    def from_dict(cls, data: Any) -> 'Pose':
        if not isinstance(data, dict):
            raise ValueError(f"位姿必须是对象: {data!r}")
        try:
            return cls(
                AxisState.from_dict(data['x'], 'x'),
                AxisState.from_dict(data['y'], 'y'),
                AxisState.from_dict(data['theta'], 'theta'),
            )
        except KeyError as e:
            raise ValueError(f"位姿缺少字段: {e}") from e

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Node:
    """迷宫节点（格子坐标 + 朝向）"""
    x: int
    y: int
    direction: NodeDirection

    @classmethod
    def from_dict(cls, data: Any, name: str = 'node') -> 'Node':
        if not isinstance(data, dict):
            raise ValueError(f"{name} 必须是对象: {data!r}")
        try:
            direction = NodeDirection(data['direction'])
        except KeyError as e:
            raise ValueError(f"{name} 缺少字段: {e}") from e
        except ValueError as e:
            raise ValueError(f"{name}.direction 无效: {data['direction']!r}") from e
        return cls(_integer(data.get('x'), f"{name}.x"),
                   _integer(data.get('y'), f"{name}.y"),
                   direction)

    def to_dict(self) -> dict:
        return {'x': self.x, 'y': self.y, 'direction': self.direction.value}


@dataclass
class SimulatorConfig:
    """仿真器参数

    这里只检查类型形状（数字是数字、字符串是字符串），不检查取值是否合理。
    """
    start: Node = field(default_factory=lambda: Node(0, 0, NodeDirection.NORTH))
    return_goal: Node = field(default_factory=lambda: Node(0, 0, NodeDirection.SOUTH))
    goals: List[Node] = field(default_factory=lambda: [
        Node(2, 0, NodeDirection.SOUTH),
        Node(2, 0, NodeDirection.WEST),
    ])
    search_initial_route: str = 'Init'
    search_final_route: str = 'Final'
    estimator_cut_off_frequency: float = 50.0
    period: float = 0.001
    translational_kp: float = 1.0
    translational_ki: float = 0.05
    translational_kd: float = 0.01
    translational_model_gain: float = 1.0
    translational_model_time_constant: float = 0.3694
    rotational_kp: float = 1.0
    rotational_ki: float = 0.2
    rotational_kd: float = 0.0
    rotational_model_gain: float = 10.0
    rotational_model_time_constant: float = 0.1499
    kx: float = 40.0
    kdx: float = 4.0
    ky: float = 40.0
    kdy: float = 4.0
    valid_control_lower_bound: float = 0.03
    low_zeta: float = 1.0
    low_b: float = 1e-3
    fail_safe_distance: float = 0.05
    search_velocity: float = 0.12
    max_velocity: float = 1.0
    max_acceleration: float = 50.0
    max_jerk: float = 100.0
    spin_angular_velocity: float = math.pi
    spin_angular_acceleration: float = 10 * math.pi
    spin_angular_jerk: float = 40 * math.pi
    run_slalom_velocity: float = 0.5

    @classmethod
    def from_dict(cls, data: Any) -> 'SimulatorConfig':
        if not isinstance(data, dict):
            raise ValueError(f"config 必须是对象: {data!r}")
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            name = f"config.{f.name}"
            if f.type is Node:
                values[f.name] = Node.from_dict(value, name)
            elif f.name == 'goals':
                if not isinstance(value, list):
                    raise ValueError(f"{name} 必须是数组")
                values[f.name] = [Node.from_dict(g, f"{name}[{i}]") for i, g in enumerate(value)]
            elif f.type is str:
                if not isinstance(value, str):
                    raise ValueError(f"{name} 必须是字符串: {value!r}")
                values[f.name] = value
            else:
                values[f.name] = _number(value, name)
        return cls(**values)

    def to_dict(self) -> dict:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Node):
                data[f.name] = value.to_dict()
            elif f.name == 'goals':
                data[f.name] = [g.to_dict() for g in value]
            else:
                data[f.name] = value
        return data


@dataclass
class SimulatorState:
    """仿真初始状态"""
    current_node: Node = field(default_factory=lambda: Node(0, 0, NodeDirection.NORTH))
    robot_state: Pose = field(default_factory=lambda: Pose.at(
        config.DEFAULT_START_X, config.DEFAULT_START_Y, config.DEFAULT_START_THETA))

    @classmethod
    def from_dict(cls, data: Any) -> 'SimulatorState':
        if not isinstance(data, dict):
            raise ValueError(f"state 必须是对象: {data!r}")
        state = cls()
        if 'current_node' in data:
            state.current_node = Node.from_dict(data['current_node'], 'state.current_node')
        if 'robot_state' in data:
            state.robot_state = Pose.from_dict(data['robot_state'])
        return state

    def to_dict(self) -> dict:
        return {
            'current_node': self.current_node.to_dict(),
            'robot_state': self.robot_state.to_dict(),
        }


DEFAULT_MAZE_STRING = '\n'.join([
    '+---+---+---+---+',
    '|               |',
    '+   +---+---+   +',
    '|   |       |   |',
    '+   +   +   +   +',
    '|   |   |       |',
    '+   +   +---+   +',
    '|   |       |   |',
    '+---+---+---+---+',
])


@dataclass
class SimulatorInput:
    """发送给仿真服务器的完整输入

    Example:
        >>> sim_input = SimulatorInput()
        >>> payload = sim_input.to_dict()
    """
    config: SimulatorConfig = field(default_factory=SimulatorConfig)
    state: SimulatorState = field(default_factory=SimulatorState)
    maze_string: str = DEFAULT_MAZE_STRING

    @classmethod
    def from_dict(cls, data: Any) -> 'SimulatorInput':
        """从JSON字典构造，缺少的部分用默认值

        Raises:
            ValueError: 类型形状不对
        """
        if not isinstance(data, dict):
            raise ValueError(f"输入必须是对象: {data!r}")
        sim_input = cls()
        if 'config' in data:
            sim_input.config = SimulatorConfig.from_dict(data['config'])
        if 'state' in data:
            sim_input.state = SimulatorState.from_dict(data['state'])
        if 'maze_string' in data:
            if not isinstance(data['maze_string'], str):
                raise ValueError("maze_string 必须是字符串")
            sim_input.maze_string = data['maze_string']
        return sim_input

    def to_dict(self) -> dict:
        return {
            'config': self.config.to_dict(),
            'state': self.state.to_dict(),
            'maze_string': self.maze_string,
        }


def parse_results(data: Any) -> List[Pose]:
    """解析服务器返回的结果序列

    每一项可以直接是 {x, y, theta}，也可以包在 {"state": {...}} 里。

    Raises:
        ValueError: 不是数组或某一项格式错误
    """
    if not isinstance(data, list):
        raise ValueError(f"结果序列必须是数组，实际是 {type(data).__name__}")
    results = []
    for i, item in enumerate(data):
        if isinstance(item, dict) and 'state' in item:
            item = item['state']
        try:
            results.append(Pose.from_dict(item))
        except ValueError as e:
            raise ValueError(f"第{i}帧格式错误: {e}") from e
    return results


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} 必须是数字: {value!r}")
    return float(value)


def _integer(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} 必须是整数: {value!r}")
    return value
