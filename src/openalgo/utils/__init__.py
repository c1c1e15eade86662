"""
Utilities Module for the OpenAlgo Client
========================================

Configuration management and logging setup.
"""

from .config import config, Config
from .logger import get_logger, log_config, LogLevel

__all__ = ['config', 'Config', 'get_logger', 'log_config', 'LogLevel']
