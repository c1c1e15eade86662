"""
Client Logging
==============

loguru setup for the OpenAlgo client. The streaming dispatch path logs
every dropped or queued frame at DEBUG, so presets can hold those
modules at WARNING while the rest of the client logs at INFO.
"""

import sys
from enum import Enum
from typing import Iterable, Optional
from loguru import logger


class LogLevel(Enum):
    SILENT = "CRITICAL"
    QUIET = "WARNING"
    NORMAL = "INFO"
    VERBOSE = "DEBUG"
    TRACE = "TRACE"


# Per-frame chatter; their warnings and errors must still reach the console
STREAMING_MODULES = (
    "openalgo.streaming.dispatcher",
    "openalgo.streaming.outbound_queue",
)

_CONSOLE_FORMATS = {
    LogLevel.SILENT: "<red>{level}</red> | {message}",
    LogLevel.QUIET: "<level>{level}</level> | {message}",
    LogLevel.NORMAL: "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | {message}",
}
_DETAILED_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | {message}"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def _module_floor(modules: Iterable[str], floor: str = "WARNING"):
    """loguru filter dropping records below floor from the given modules"""
    modules = tuple(modules)
    floor_no = logger.level(floor).no

    def _filter(record) -> bool:
        name = record["name"] or ""
        if name.startswith(modules):
            return record["level"].no >= floor_no
        return True

    return _filter


class LogConfig:
    """Owns the client's console handler and any file handlers it adds"""

    def __init__(self):
        self.current_level = LogLevel.NORMAL
        self._initialized = False
        self._console_handler_id: Optional[int] = None

    def setup_logging(self,
                      level: LogLevel = LogLevel.NORMAL,
                      quiet_modules: Iterable[str] = (),
                      show_backtrace: bool = False,
                      show_diagnose: bool = False,
                      sink=sys.stderr) -> None:
        """
        (Re)configure the console handler.

        Args:
            level: Minimum level for the console
            quiet_modules: Module prefixes held at WARNING and above
            show_backtrace: Extend tracebacks beyond the catching frame
            show_diagnose: Show variable values in tracebacks
            sink: Console destination (stderr by default)
        """
        if self._console_handler_id is not None:
            try:
                logger.remove(self._console_handler_id)
            except ValueError:
                # Handler already removed by someone else's logger.remove()
                pass
        elif not self._initialized:
            # Drop loguru's default stderr handler
            logger.remove()

        self._console_handler_id = logger.add(
            sink,
            format=_CONSOLE_FORMATS.get(level, _DETAILED_FORMAT),
            level=level.value,
            filter=_module_floor(quiet_modules) if quiet_modules else None,
            backtrace=show_backtrace,
            diagnose=show_diagnose,
            colorize=sink in (sys.stderr, sys.stdout)
        )

        if not self._initialized and level != LogLevel.SILENT:
            logger.info(f"Logging configured: level={level.name}")
        self.current_level = level
        self._initialized = True

    def add_file_logging(self,
                         filepath: str,
                         level: LogLevel = LogLevel.VERBOSE,
                         rotation: str = "10 MB",
                         retention: str = "7 days") -> int:
        """Log to a rotating file as well; returns the loguru handler id"""
        handler_id = logger.add(
            filepath,
            format=_FILE_FORMAT,
            level=level.value,
            rotation=rotation,
            retention=retention,
            backtrace=True,
            diagnose=True,
            enqueue=True
        )
        logger.info(f"File logging enabled: {filepath}")
        return handler_id

    def suppress_module_logging(self, modules: Iterable[str]) -> None:
        """Silence modules entirely, errors included"""
        for module in modules:
            logger.disable(module)

    def enable_module_logging(self, modules: Iterable[str]) -> None:
        for module in modules:
            logger.enable(module)


# Global log configuration instance
log_config = LogConfig()


def setup_development_logging():
    """Everything down to DEBUG, with full tracebacks"""
    log_config.setup_logging(level=LogLevel.VERBOSE, show_backtrace=True, show_diagnose=True)


def setup_production_logging(sink=sys.stderr):
    """INFO for the client, WARNING and above from the per-frame streaming path"""
    log_config.setup_logging(level=LogLevel.NORMAL, quiet_modules=STREAMING_MODULES, sink=sink)


def setup_silent_logging():
    log_config.setup_logging(level=LogLevel.SILENT)


def get_logger(name: str):
    """
    Logger bound to a client component.

    Args:
        name: Component name, attached to every record as ``component``
    """
    if not log_config._initialized:
        log_config.setup_logging()

    return logger.bind(component=name)
