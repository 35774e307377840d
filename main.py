"""
mouse_viewer 主程序入口
micromouse迷宫编辑与仿真轨迹回放

运行模式：
  python main.py                    # 默认：matplotlib桌面查看器
  python main.py --web              # Web查看器（浏览器访问）
  python main.py --maze maze.txt    # 从文本文件载入迷宫
"""

import sys
import signal
import argparse
from pathlib import Path

import config
from mouse_viewer.maze.codec import encode, maze_from_file
from mouse_viewer.session import ViewerSession
from mouse_viewer.simulation.client import SimulationClient
from mouse_viewer.utils.logger import setup_from_config


# 全局会话（用于信号处理）
session = None


def signal_handler(sig, frame):
    """处理Ctrl+C信号"""
    print("\n\n[系统] 接收到中断信号，正在安全退出...")
    if session:
        session.close()
    print("[系统] 已退出")
    sys.exit(0)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='micromouse迷宫编辑与轨迹回放')
    parser.add_argument('--web', action='store_true',
                        help='使用Web查看器（浏览器访问）')
    parser.add_argument('--port', type=int, default=config.WEB_PORT,
                        help=f'Web服务器端口（默认{config.WEB_PORT}）')
    parser.add_argument('--maze', type=str, default=None,
                        help='迷宫文本文件')
    parser.add_argument('--server', type=str, default=config.SIM_SERVER_URL,
                        help=f'仿真服务器地址（默认{config.SIM_SERVER_URL}）')
    parser.add_argument('--board-size', type=int, default=config.SIM_BOARD_SIZE,
                        help=f'仿真棋盘尺寸（默认{config.SIM_BOARD_SIZE}）')
    parser.add_argument('--simulate', action='store_true',
                        help='启动后立即请求一次仿真')
    parser.add_argument('--log-level', type=str, default=None,
                        help=f'日志级别（默认{config.LOG_LEVEL}）')
    return parser.parse_args(argv)


def load_maze_file(viewer_session, path) -> bool:
    """从文本文件载入迷宫（规范化后交给会话）

    Returns:
        是否载入成功
    """
    maze_path = Path(path)
    if not maze_path.exists():
        print(f"[错误] 迷宫文件不存在: {maze_path}")
        return False
    walls, width = maze_from_file(maze_path)
    viewer_session.set_maze_string(encode(walls, width))
    print(f"[系统] 已载入迷宫: {maze_path} ({width}x{width})")
    return True


def main(argv=None):
    """主函数"""
    global session

    args = parse_args(argv)

    # 配置日志
    setup_from_config(args.log_level)

    if not config.validate_config():
        sys.exit(1)

    print("=" * 70)
    print(" mouse_viewer - micromouse迷宫编辑与轨迹回放")
    print("=" * 70)
    print(config.get_config_summary())

    client = SimulationClient(base_url=args.server, board_size=args.board_size)
    session = ViewerSession(client=client)

    if args.maze:
        if not load_maze_file(session, args.maze):
            sys.exit(1)

    session.on_error = lambda e: print(f"[仿真] ❌ {e}")
    session.on_result = lambda results: print(f"[仿真] ✅ 收到{len(results)}帧")

    if args.simulate:
        session.run_simulation()

    signal.signal(signal.SIGINT, signal_handler)

    try:
        if args.web:
            from mouse_viewer.visualization.web_visualizer import WebVisualizer
            visualizer = WebVisualizer(session, port=args.port)
            visualizer.start(blocking=True)
        else:
            from mouse_viewer.visualization.maze_visualizer import MazeVisualizer
            visualizer = MazeVisualizer(session)
            print("[系统] 按 h 查看快捷键")
            visualizer.show()
    finally:
        print("\n[系统] 正在关闭...")
        session.close()
        print("[系统] 已安全退出")


if __name__ == "__main__":
    main()
