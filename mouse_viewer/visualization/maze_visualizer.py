"""
桌面迷宫可视化模块
用matplotlib显示迷宫和机器人轨迹回放，支持鼠标编辑墙和键盘控制回放
"""

import logging
from typing import Optional, Tuple

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.collections import LineCollection
from matplotlib.widgets import Slider

import config

logger = logging.getLogger(__name__)

HELP_TEXT = """
快捷键说明：
  左键  - 添加/删除墙
  空格  - 播放/暂停
  r     - 回到开头
  ←/→   - 减速/加速
  enter - 重新仿真
  s     - 保存迷宫文本
  h     - 显示帮助
  q     - 退出
"""


class MazeVisualizer:
    """桌面迷宫查看器

    画布坐标直接使用像素（Y轴向下），与编辑器的几何一致，
    所以点击事件的xdata/ydata可以直接交给编辑器。

    Example:
        >>> session = ViewerSession()
        >>> visualizer = MazeVisualizer(session)
        >>> visualizer.show()
    """

    def __init__(self, session, figsize: Optional[Tuple[int, int]] = None):
        """初始化可视化器

        Args:
            session: ViewerSession对象
            figsize: 图形大小（宽, 高）单位英寸，None则使用config.VISUALIZE_WINDOW_SIZE
        """
        self.session = session

        if figsize is None:
            figsize = config.VISUALIZE_WINDOW_SIZE

        self.fig, self.ax = plt.subplots(figsize=figsize)
        self.fig.subplots_adjust(bottom=0.15)
        self.fig.suptitle('Micromouse Simulator', fontsize=16, fontweight='bold')

        self.wall_lines = LineCollection([], colors=config.COLOR_WALL, linewidths=2)
        self.robot_lines = LineCollection([], colors=config.COLOR_ROBOT, linewidths=1.5, zorder=10)
        self.ax.add_collection(self.wall_lines)
        self.ax.add_collection(self.robot_lines)
        self.ax.set_aspect('equal')
        self.ax.set_xticks([])
        self.ax.set_yticks([])

        # 进度条
        slider_ax = self.fig.add_axes([0.15, 0.05, 0.7, 0.03])
        self.slider = Slider(slider_ax, 'Progress', 0.0, 100.0, valinit=0.0)
        self.slider.on_changed(self._on_slider_change)
        self._syncing_slider = False

        self.status_text = self.fig.text(
            0.02, 0.01, '',
            fontsize=9,
            family='monospace',
            verticalalignment='bottom'
        )

        self.fig.canvas.mpl_connect('button_press_event', self._on_mouse_click)
        self.fig.canvas.mpl_connect('key_press_event', self._on_key_press)
        self.fig.canvas.mpl_connect('close_event', self._on_close)

        self.animation = None
        self.frame_count = 0

        self._fit_view()
        self.redraw()
        logger.info("MazeVisualizer初始化完成")

    def _fit_view(self):
        """按迷宫尺寸设置坐标范围（Y轴翻转成屏幕方向）"""
        geometry = self.session.editor.geometry
        self._fitted_geometry = geometry
        margin = geometry.square_width / 2
        self.ax.set_xlim(geometry.origin_x - margin, geometry.origin_x + geometry.size_px + margin)
        self.ax.set_ylim(geometry.origin_y + margin, geometry.origin_y - geometry.size_px - margin)

    # ------------------------------------------------------------------
    # 交互
    # ------------------------------------------------------------------

    def _on_mouse_click(self, event):
        """鼠标左键点击：切换最近的墙"""
        if event.inaxes != self.ax or event.button != 1:
            return
        if event.xdata is None or event.ydata is None:
            return

        wall = self.session.click(event.xdata, event.ydata)
        if wall is not None:
            logger.debug(f"[交互] 切换墙: ({wall.x}, {wall.y}, {wall.dir.value})")
            self.redraw()

    def _on_key_press(self, event):
        """键盘按键事件处理"""
        player = self.session.player

        if event.key == ' ':
            player.toggle_play()
        elif event.key == 'r':
            player.reset()
        elif event.key == 'left':
            speed = player.speed_down()
            print(f"[交互] 倍速: x{speed}")
        elif event.key == 'right':
            speed = player.speed_up()
            print(f"[交互] 倍速: x{speed}")
        elif event.key == 'enter':
            self.session.run_simulation()
            print("[交互] 已提交仿真请求")
        elif event.key == 's':
            self.session.save_maze(config.MAZE_SAVE_PATH)
            print(f"[交互] 迷宫已保存: {config.MAZE_SAVE_PATH}")
        elif event.key == 'h':
            print(HELP_TEXT)
        elif event.key == 'q':
            self.close()
            return

        self.redraw()

    def _on_slider_change(self, value):
        """手动拖动进度条"""
        if self._syncing_slider:
            return
        self.session.player.scrub_to(value)
        self.redraw()

    def _on_close(self, event):
        self.stop()

    # ------------------------------------------------------------------
    # 绘制
    # ------------------------------------------------------------------

    def redraw(self):
        """按会话的当前状态重绘"""
        self.wall_lines.set_segments(self.session.wall_segments())
        self.robot_lines.set_segments(self.session.robot_segments())

        snapshot = self.session.player.snapshot()
        self._syncing_slider = True
        try:
            self.slider.set_val(snapshot['scrub'])
        finally:
            self._syncing_slider = False

        self._update_status_bar(snapshot)
        self.fig.canvas.draw_idle()
        self.frame_count += 1

    def _update_status_bar(self, snapshot: dict):
        index = snapshot['frame_index']
        status_lines = [
            'Playing' if snapshot['playing'] else 'Stopped',
            f"Speed: x{snapshot['speed']}",
            f"Frame: {'-' if index is None else index}/{snapshot['frame_count']}",
        ]
        if self.session.loading:
            status_lines.append('Loading...')
        if self.session.last_error:
            status_lines.append(f"Error: {self.session.last_error}")
        self.status_text.set_text(" | ".join(status_lines))

    def _animation_update(self, frame):
        # 迷宫尺寸可能在仿真请求/载入文本后改变
        if self.session.editor.geometry != self._fitted_geometry:
            self._fit_view()
        self.redraw()

    # ------------------------------------------------------------------
    # 生命周期
    # ------------------------------------------------------------------

    def start(self, interval: Optional[int] = None):
        """启动回放时钟和界面刷新动画

        Args:
            interval: 刷新间隔（毫秒），None则根据config.VISUALIZE_RATE自动计算
        """
        if interval is None:
            interval = int(1000 / config.VISUALIZE_RATE)

        self.session.clock.start()
        self.animation = FuncAnimation(
            self.fig,
            self._animation_update,
            interval=interval,
            blit=False,
            cache_frame_data=False
        )
        logger.info(f"动画已启动，刷新间隔: {interval}ms")

    def stop(self):
        """停止动画和回放时钟"""
        if self.animation:
            self.animation.event_source.stop()
            self.animation = None
        self.session.clock.stop()

    def show(self):
        """显示窗口（阻塞模式），关闭窗口时停止时钟"""
        self.start()
        try:
            plt.show()
        finally:
            self.stop()

    def close(self):
        """关闭窗口"""
        self.stop()
        plt.close(self.fig)

