"""
日志系统模块
统一的日志配置和管理
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from logging.handlers import RotatingFileHandler

import config


def setup_logger(
    name: str,
    log_file: str = None,
    level: int = logging.INFO,
    console: bool = True,
    max_bytes: int = config.LOG_MAX_BYTES,
    backup_count: int = config.LOG_BACKUP_COUNT
) -> logging.Logger:
    """配置日志记录器

    Args:
        name: 日志记录器名称（'mouse_viewer' 会同时作用于所有子模块）
        log_file: 日志文件路径（None则只输出到控制台）
        level: 日志级别
        console: 是否输出到控制台
        max_bytes: 单个日志文件最大字节数（默认config.LOG_MAX_BYTES）
        backup_count: 保留的备份文件数量（默认config.LOG_BACKUP_COUNT）

    Returns:
        配置好的Logger对象

    Example:
        >>> logger = setup_logger('mouse_viewer', 'data/logs/viewer.log')
        >>> logger.info('启动')
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 避免重复添加handler
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT)

    # 文件处理器（带轮转）
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # 控制台处理器
    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def setup_from_config(level: str = None) -> logging.Logger:
    """按config.LOG_*配置整个mouse_viewer包的日志

    Args:
        level: 覆盖config.LOG_LEVEL，例如 'DEBUG'

    Returns:
        'mouse_viewer' 根记录器
    """
    level_name = (level or config.LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"未知的日志级别: {level_name}")

    log_file = None
    if config.ENABLE_FILE_LOG:
        timestamp = datetime.now().strftime('%Y%m%d')
        log_file = Path(config.LOG_DIR) / f'viewer_{timestamp}.log'

    return setup_logger('mouse_viewer', log_file, numeric_level,
                        console=config.ENABLE_CONSOLE_LOG)
