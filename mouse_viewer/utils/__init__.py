"""
工具模块
"""

from .logger import setup_logger, setup_from_config

__all__ = ['setup_logger', 'setup_from_config']
