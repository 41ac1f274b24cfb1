"""
Logging configuration for Vital Canvas.
"""

import logging
import os
import sys
from pathlib import Path

ROOT_LOGGER_NAME = "vitalcanvas"


def setup_logging(
    level: str = None,
    log_file: str = None,
) -> logging.Logger:
    """
    Set up logging for the application.
    
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env var or INFO.
        log_file: Optional file path to write logs to.
    
    Returns:
        Configured logger instance
    """
    level = level or os.getenv("LOG_LEVEL", "INFO")
    level_num = getattr(logging, level.upper(), logging.INFO)
    
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level_num)
    
    # Re-running setup must not stack handlers
    logger.handlers = []
    
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level_num)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level_num)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    
    # Module loggers live under src.*, api.* and ui.*; route them to the same handlers
    for package in ("src", "api", "ui"):
        package_logger = logging.getLogger(package)
        package_logger.setLevel(level_num)
        package_logger.handlers = list(logger.handlers)
    
    # Request lines from the HTTP clients are only useful when debugging
    for noisy in ("httpx", "openai"):
        logging.getLogger(noisy).setLevel(max(level_num, logging.WARNING))
    
    return logger
