"""
查看器会话模块
把迷宫编辑、仿真请求和轨迹回放组合在一起，供桌面和Web查看器共用
"""

import logging
import threading
from typing import Callable, List, Optional

import config

from .maze.codec import maze_to_file
from .maze.editor import WallEditor
from .maze.wall import Wall
from .playback.clock import PlaybackClock
from .playback.player import TrajectoryPlayer
from .simulation.client import SimulationClient, SimulationError, SimulationRunner
from .simulation.protocol import Pose, SimulatorInput
from .visualization.maze_renderer import maze_segments
from .visualization.pose_renderer import Segment, pose_outline

logger = logging.getLogger(__name__)


class ViewerSession:
    """查看器会话

    持有唯一一份权威状态（编辑器由会话锁保护，回放器有自己的锁）：
    1. 仿真输入（其中的maze_string由编辑器维护）
    2. 墙编辑器
    3. 轨迹回放器和回放时钟
    4. 后台仿真执行器

    Example:
        >>> session = ViewerSession()
        >>> session.click(325, 275)          # 切换一面墙
        >>> session.run_simulation()          # 后台请求仿真
        >>> with session.clock:
        ...     session.player.play()
    """

    def __init__(self,
                 sim_input: Optional[SimulatorInput] = None,
                 client: Optional[SimulationClient] = None,
                 tick_ms: float = config.PLAYBACK_TICK_MS):
        """初始化会话

        Args:
            sim_input: 仿真输入，None则使用默认输入
            client: 仿真客户端，None则按config创建
            tick_ms: 回放时钟周期（毫秒）
        """
        self.sim_input = sim_input or SimulatorInput()

        # 时钟线程、Web请求线程和界面线程都会读写编辑器
        self._lock = threading.RLock()

        # 编辑器修改迷宫后写回仿真输入
        self.editor = WallEditor.from_text(self.sim_input.maze_string,
                                           on_change=self._on_maze_change)

        self.player = TrajectoryPlayer(tick_ms=tick_ms)
        self.clock = PlaybackClock(self.player.tick, interval=tick_ms / 1000.0)

        self.client = client or SimulationClient()
        self.runner = SimulationRunner(self.client,
                                       on_result=self._on_result,
                                       on_error=self._on_error)
        self.last_error: Optional[str] = None

        # 外部监听（界面刷新等）
        self.on_maze_change: Optional[Callable[[str], None]] = None
        self.on_result: Optional[Callable[[List[Pose]], None]] = None
        self.on_error: Optional[Callable[[SimulationError], None]] = None

    # ------------------------------------------------------------------
    # 迷宫编辑
    # ------------------------------------------------------------------

    @property
    def maze_string(self) -> str:
        with self._lock:
            return self.sim_input.maze_string

    def maze_state(self) -> dict:
        """迷宫文本、尺寸和墙列表的一致快照"""
        with self._lock:
            return {
                'maze_string': self.sim_input.maze_string,
                'width': self.editor.width,
                'walls': self.editor.walls.to_list(),
            }

    def save_maze(self, path):
        """把当前迷宫写入文本文件"""
        with self._lock:
            walls, width = self.editor.walls.copy(), self.editor.width
        maze_to_file(path, walls, width)

    def set_maze_string(self, text: str):
        """外部（表单/文件）给出新的迷宫文本"""
        with self._lock:
            self.sim_input.maze_string = text
            self.editor.load(text)

    def click(self, x: float, y: float) -> Optional[Wall]:
        """画布点击：点到迷宫外的直接忽略"""
        with self._lock:
            if not self.editor.geometry.contains(x, y):
                return None
            return self.editor.click(x, y)

    def _on_maze_change(self, text: str):
        self.sim_input.maze_string = text
        if self.on_maze_change:
            self.on_maze_change(text)

    # ------------------------------------------------------------------
    # 仿真
    # ------------------------------------------------------------------

    def run_simulation(self, sim_input: Optional[SimulatorInput] = None) -> int:
        """停止回放并在后台请求仿真

        Args:
            sim_input: 新的仿真输入（会替换当前输入并重新载入迷宫）

        Returns:
            请求代号
        """
        with self._lock:
            if sim_input is not None:
                self.sim_input = sim_input
                self.editor.load(sim_input.maze_string)
            current = self.sim_input
        self.player.stop()
        self.last_error = None
        # 不持有会话锁提交：投递结果时会回调到scene()
        return self.runner.submit(current)

    @property
    def loading(self) -> bool:
        return self.runner.loading

    def _on_result(self, results: List[Pose]):
        self.player.load(results)
        if self.on_result:
            self.on_result(results)

    def _on_error(self, error: SimulationError):
        # 保留上一次的结果和回放状态
        self.last_error = str(error)
        if self.on_error:
            self.on_error(error)

    # ------------------------------------------------------------------
    # 渲染
    # ------------------------------------------------------------------

    def wall_segments(self) -> List[Segment]:
        with self._lock:
            return maze_segments(self.editor.walls, self.editor.geometry)

    def robot_segments(self) -> List[Segment]:
        """当前帧机器人外形，没有当前帧时为空"""
        pose = self.player.current_pose()
        if pose is None:
            return []
        with self._lock:
            geometry = self.editor.geometry
        return pose_outline(pose, geometry)

    def scene(self) -> dict:
        """当前画面（JSON可序列化）"""
        with self._lock:
            return {
                'width': self.editor.width,
                'walls': self.wall_segments(),
                'robot': self.robot_segments(),
                'playback': self.player.snapshot(),
            }

    def close(self):
        """结束会话：停止时钟、关闭HTTP连接"""
        self.clock.stop()
        self.client.close()
        logger.info("会话已关闭")
