"""
Utility modules
"""
from .declaration_printer import DeclarationPrinter
from .logger import configure_logging, get_logger, log_node
from .node_search import NodeSearch

__all__ = [
    'DeclarationPrinter',
    'NodeSearch',
    'configure_logging',
    'get_logger',
    'log_node',
]
