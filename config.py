# config.py - mouse_viewer 统一配置文件
# 修改此文件后，重启程序即可生效

import math

# ============================================================================
# 迷宫网格几何参数（像素）
# ============================================================================
SQUARE_WIDTH_PX = 50               # 单个格子在画布上的边长（像素）
CANVAS_ORIGIN_X = 300              # 迷宫左下角的屏幕X坐标（像素）
CANVAS_MARGIN_TOP = 100            # 迷宫顶部到画布上沿的距离（像素）

# ============================================================================
# 物理尺寸（米）
# ============================================================================
SQUARE_WIDTH_M = 0.09              # 单个格子的物理边长（米），标准micromouse迷宫为90mm

# 机器人外形多边形（局部坐标系，+y为前进方向）
# ⚠️ 修改后渲染的机器人形状会改变，但不影响仿真结果
ROBOT_HALF_WIDTH = 0.019           # 半车宽（米）
ROBOT_BACK_LENGTH = 0.020          # 中心到车尾距离（米）
ROBOT_FRONT_LENGTH = 0.033         # 中心到车头距离（米）
ROBOT_MID_OFFSET = 0.013           # 中心到车身侧边前端距离（米）

# ============================================================================
# 回放配置
# ============================================================================
PLAYBACK_TICK_MS = 50              # 回放时钟周期（毫秒）
PLAYBACK_SPEEDS = (0.25, 0.5, 0.75, 1.0, 2.0, 3.0, 4.0, 8.0)  # 倍速表
PLAYBACK_DEFAULT_SPEED_INDEX = 3   # 默认倍速索引（指向1.0）

# ============================================================================
# 仿真服务器配置
# ============================================================================
SIM_SERVER_URL = 'http://localhost:3030'
SIM_BOARD_SIZE = 16                # 仿真器的迷宫尺寸（格数）
SIM_PAD_MAZE = True                # 发送前是否把小迷宫补齐到SIM_BOARD_SIZE
SIM_TIMEOUT = 30.0                 # 请求超时（秒）

# 默认机器人初始位姿（第一个格子中心，朝北）
DEFAULT_START_X = SQUARE_WIDTH_M / 2
DEFAULT_START_Y = SQUARE_WIDTH_M / 2
DEFAULT_START_THETA = math.pi / 2

# ============================================================================
# Web可视化配置
# ============================================================================
WEB_HOST = '0.0.0.0'
WEB_PORT = 5000
WEB_SECRET_KEY = 'mouse_viewer_secret'

# ============================================================================
# 桌面可视化配置（matplotlib）
# ============================================================================
VISUALIZE_WINDOW_SIZE = (12, 10)   # 窗口大小（英寸，matplotlib figsize）
VISUALIZE_RATE = 20                # 重绘帧率（fps）
COLOR_WALL = '#222222'             # 墙颜色
COLOR_ROBOT = '#1f77b4'            # 机器人颜色
MAZE_SAVE_PATH = 'data/mazes/maze.txt'  # 按s键保存迷宫文本的位置

# ============================================================================
# 日志配置
# ============================================================================
LOG_DIR = 'data/logs'
LOG_LEVEL = 'INFO'                 # DEBUG | INFO | WARNING | ERROR
ENABLE_FILE_LOG = True
ENABLE_CONSOLE_LOG = True
LOG_FORMAT = '[%(asctime)s] %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'
LOG_MAX_BYTES = 10 * 1024 * 1024    # 单个日志文件上限（字节）
LOG_BACKUP_COUNT = 5               # 轮转保留的旧日志文件数

# ============================================================================
# 辅助函数
# ============================================================================

def get_config_summary():
    """获取配置摘要（用于调试）"""
    return f"""
╔════════════════════════════════════════════════════════════════╗
║                   mouse_viewer 配置摘要                        ║
╠════════════════════════════════════════════════════════════════╣
║ 网格: {SQUARE_WIDTH_PX}px/格 = {SQUARE_WIDTH_M}m/格
║ 回放: {PLAYBACK_TICK_MS}ms/帧, 倍速={PLAYBACK_SPEEDS[PLAYBACK_DEFAULT_SPEED_INDEX]}
║ 仿真器: {SIM_SERVER_URL} ({SIM_BOARD_SIZE}x{SIM_BOARD_SIZE})
║ Web: http://{WEB_HOST}:{WEB_PORT}
║ 日志: {LOG_LEVEL} -> {LOG_DIR}
╚════════════════════════════════════════════════════════════════╝
    """


def validate_config():
    """验证配置参数的合理性"""
    errors = []
    warnings = []

    if SQUARE_WIDTH_PX <= 0:
        errors.append("SQUARE_WIDTH_PX 必须大于0")
    if SQUARE_WIDTH_M <= 0:
        errors.append("SQUARE_WIDTH_M 必须大于0")
    if PLAYBACK_TICK_MS <= 0:
        errors.append("PLAYBACK_TICK_MS 必须大于0")
    if not 0 <= PLAYBACK_DEFAULT_SPEED_INDEX < len(PLAYBACK_SPEEDS):
        errors.append("PLAYBACK_DEFAULT_SPEED_INDEX 超出倍速表范围")
    if SIM_BOARD_SIZE <= 0:
        errors.append("SIM_BOARD_SIZE 必须大于0")
    if LOG_MAX_BYTES <= 0 or LOG_BACKUP_COUNT < 0:
        errors.append("LOG_MAX_BYTES 必须大于0，LOG_BACKUP_COUNT 不能为负")

    if ROBOT_HALF_WIDTH * 2 > SQUARE_WIDTH_M:
        warnings.append(f"ROBOT_HALF_WIDTH={ROBOT_HALF_WIDTH}m 车身比格子还宽")
    if PLAYBACK_TICK_MS > 200:
        warnings.append(f"PLAYBACK_TICK_MS={PLAYBACK_TICK_MS}ms 回放会明显卡顿")

    if errors:
        print("❌ 配置错误:")
        for err in errors:
            print(f"   - {err}")

    if warnings:
        print("⚠️  配置警告:")
        for warn in warnings:
            print(f"   - {warn}")

    if not errors and not warnings:
        print("✅ 配置验证通过")

    return len(errors) == 0


if __name__ == '__main__':
    # 如果直接运行此文件，显示配置摘要
    print(get_config_summary())
    validate_config()
