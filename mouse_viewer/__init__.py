"""
mouse_viewer - micromouse迷宫编辑与轨迹回放
"""

__version__ = '0.1.0'
