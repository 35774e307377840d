"""
回放时钟
固定周期调用回调的定时器，生命周期由持有者显式管理
"""

import logging
import threading
from typing import Callable, Optional

import config

logger = logging.getLogger(__name__)


class PlaybackClock:
    """周期时钟

    start()时启动一个后台线程，每隔interval秒调用一次on_tick，
    stop()时取消并等待线程退出。stop()可以重复调用，只有第一次生效。
    回调抛出的异常只记录日志，时钟继续运行。

    Example:
        >>> with PlaybackClock(player.tick):
        ...     run_ui()
    """

    def __init__(self, on_tick: Callable[[], None],
                 interval: float = config.PLAYBACK_TICK_MS / 1000.0):
        """初始化时钟

        Args:
            on_tick: 每拍调用的回调（无参数）
            interval: 周期（秒）
        """
        if interval <= 0:
            raise ValueError(f"时钟周期必须大于0: {interval}")
        self.on_tick = on_tick
        self.interval = interval
        self.tick_count = 0

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """启动时钟；已经在运行时不会再开新线程"""
        if self._thread is not None:
            logger.warning("回放时钟已经启动过，忽略重复的start()")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name="PlaybackClock"
        )
        self._thread.start()
        logger.debug(f"回放时钟已启动 (周期{self.interval * 1000:.0f}ms)")

    def stop(self):
        """停止时钟并等待线程退出"""
        thread = self._thread
        if thread is None or self._stop_event.is_set():
            return

        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout=2.0)
        logger.debug(f"回放时钟已停止 (共{self.tick_count}拍)")

    def _run(self):
        """时钟循环（在独立线程中运行）"""
        while not self._stop_event.wait(self.interval):
            try:
                self.on_tick()
                self.tick_count += 1
            except Exception as e:
                logger.error(f"时钟回调异常: {e}", exc_info=True)

    def __enter__(self) -> 'PlaybackClock':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
