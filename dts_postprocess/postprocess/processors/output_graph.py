"""
Processor writing the dependency graph as JSON
"""
import json
import os

from dts_postprocess.utils.logger import get_logger


def output_graph(filepath, indent=2):
    """
    Create a processor serializing the dependency graph to a file

    Args:
        filepath: Output file path
        indent: JSON indentation

    Returns:
        Processor function
    """
    if not isinstance(filepath, (str, os.PathLike)):
        raise TypeError("output_graph error: 'filepath' is not a string or path.")

    def output_dependency_graph(*, graph=None, logger=None, **kwargs):
        logger = logger or get_logger()

        if graph is None:
            logger.warning("[output_graph] No dependency graph available; enable 'dependencies'.")
            return

        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(graph.to_json(), f, indent=indent)
        except OSError as e:
            logger.error(f"[output_graph] Failed to write file for dependencies graph:\n{e}")

    return output_dependency_graph
