"""
Logging setup and node logging helpers
"""
import logging
import sys

from .declaration_printer import DeclarationPrinter

PACKAGE_LOGGER = 'dts_postprocess'
DEFAULT_FORMAT = '%(levelname)s %(name)s: %(message)s'

_HANDLER_NAME = 'dts_postprocess.stderr'


def get_logger():
    """The package logger handed to processors by default"""
    return logging.getLogger(PACKAGE_LOGGER)


def configure_logging(level='INFO', fmt=DEFAULT_FORMAT):
    """
    Attach a stderr handler to the package logger

    Calling this again only updates the level and format.

    Args:
        level: Level name or number
        fmt: logging format string

    Returns:
        The package logger
    """
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"configure_logging error: unknown log level '{name}'.")

    package_logger = get_logger()
    package_logger.setLevel(level)

    handler = next((h for h in package_logger.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        package_logger.addHandler(handler)

    handler.setFormatter(logging.Formatter(fmt))
    return package_logger


def log_node(node, level=logging.DEBUG, logger=None):
    """
    Log a declaration node printed as source text

    Args:
        node: DeclarationNode to print
        level: Log level
        logger: Target logger, the package logger by default
    """
    logger = logger or get_logger()
    if not logger.isEnabledFor(level):
        return

    logger.log(level, f"[log_node] {node.kind.value}:\n{DeclarationPrinter().print(node)}")
