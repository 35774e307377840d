"""
仿真服务器客户端
把迷宫和参数发送给仿真服务器，取回位姿结果序列
"""

import logging
import threading
from typing import Callable, List, Optional

import requests

import config

from .protocol import Pose, SimulatorInput, parse_results
from ..maze.codec import shape_maze_string

logger = logging.getLogger(__name__)


class SimulationError(Exception):
    """仿真请求失败（网络错误、HTTP错误或返回格式错误）"""


class SimulationClient:
    """仿真服务器HTTP客户端

    Example:
        >>> client = SimulationClient('http://localhost:3030')
        >>> results = client.simulate(SimulatorInput())
        >>> print(f"收到{len(results)}帧")
    """

    def __init__(self, base_url: str = config.SIM_SERVER_URL,
                 board_size: int = config.SIM_BOARD_SIZE,
                 pad_maze: bool = config.SIM_PAD_MAZE,
                 timeout: float = config.SIM_TIMEOUT,
                 session: Optional[requests.Session] = None):
        """初始化客户端

        Args:
            base_url: 服务器地址
            board_size: 仿真棋盘尺寸（格数）
            pad_maze: 发送前是否把迷宫补齐到board_size
            timeout: 请求超时（秒）
            session: 可传入已有的requests.Session
        """
        self.base_url = base_url.rstrip('/')
        self.board_size = board_size
        self.pad_maze = pad_maze
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/simulate/{self.board_size}/search/"

    def build_payload(self, sim_input: SimulatorInput) -> dict:
        """生成请求体"""
        payload = sim_input.to_dict()
        if self.pad_maze:
            try:
                payload['maze_string'] = shape_maze_string(sim_input.maze_string, self.board_size)
            except ValueError as e:
                raise SimulationError(str(e)) from e
        return payload

    def simulate(self, sim_input: SimulatorInput) -> List[Pose]:
        """发送仿真请求（阻塞）

        Raises:
            SimulationError: 请求失败或返回格式错误
        """
        payload = self.build_payload(sim_input)
        logger.info(f"发送仿真请求: {self.endpoint}")
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise SimulationError(f"仿真请求超时 ({self.timeout}s)") from e
        except requests.exceptions.RequestException as e:
            raise SimulationError(f"仿真请求失败: {e}") from e
        except ValueError as e:
            raise SimulationError(f"返回数据不是合法JSON: {e}") from e

        try:
            results = parse_results(data)
        except ValueError as e:
            raise SimulationError(f"返回数据格式错误: {e}") from e

        logger.info(f"仿真完成: {len(results)}帧")
        return results

    def close(self):
        self.session.close()


class SimulationRunner:
    """后台仿真执行器

    每次submit()都在新线程里请求仿真，并分配递增的代号；
    只有代号仍是最新的那次请求的结果才会交给回调，过期的结果直接丢弃。
    投递回调期间持有锁，新的submit()会等投递结束后再分配代号。

    Example:
        >>> runner = SimulationRunner(client, on_result=player.load, on_error=print)
        >>> runner.submit(sim_input)
    """

    def __init__(self, client: SimulationClient,
                 on_result: Callable[[List[Pose]], None],
                 on_error: Optional[Callable[[SimulationError], None]] = None):
        self.client = client
        self.on_result = on_result
        self.on_error = on_error

        self.generation = 0
        # 回调里可能再次submit()，所以用可重入锁
        self._lock = threading.RLock()
        self._threads: List[threading.Thread] = []

    @property
    def loading(self) -> bool:
        """是否有请求未完成"""
        return any(t.is_alive() for t in self._threads)

    def submit(self, sim_input: SimulatorInput) -> int:
        """提交一次仿真

        Returns:
            本次请求的代号
        """
        with self._lock:
            self.generation += 1
            generation = self.generation

        thread = threading.Thread(
            target=self._run,
            args=(generation, sim_input),
            daemon=True,
            name=f"SimulationRunner-{generation}"
        )
        self._threads = [t for t in self._threads if t.is_alive()]
        self._threads.append(thread)
        thread.start()
        return generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self.generation

    def wait(self, timeout: Optional[float] = None):
        """等待所有未完成的请求"""
        for thread in list(self._threads):
            thread.join(timeout)

    def _run(self, generation: int, sim_input: SimulatorInput):
        error = None
        try:
            results = self.client.simulate(sim_input)
        except SimulationError as e:
            results, error = None, e

        # 代号检查和回调在同一把锁内，submit()只能排在整次投递之前或之后
        with self._lock:
            if generation != self.generation:
                kind = '失败结果' if error is not None else '仿真结果'
                logger.debug(f"丢弃过期的{kind} (#{generation}, 最新#{self.generation})")
                return
            if error is not None:
                logger.error(f"仿真失败 (#{generation}): {error}")
                if self.on_error:
                    self.on_error(error)
                return
            self.on_result(results)
