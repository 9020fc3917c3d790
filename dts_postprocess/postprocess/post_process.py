"""
Coordinates running processor functions over a declaration tree
"""
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from dts_postprocess.models.declaration_node import DeclarationNode, ROOT_KINDS
from dts_postprocess.parsers.declaration_parser import DeclarationParser
from dts_postprocess.transformers.base_transformer import apply_transformers
from dts_postprocess.utils.declaration_printer import DeclarationPrinter
from dts_postprocess.utils.logger import get_logger
from .graph_analysis import GraphAnalysis


@dataclass
class PostProcessResult:
    """Outcome of a pipeline run"""
    tree: DeclarationNode
    graph: Optional[GraphAnalysis]
    completed: bool


def processor_name(processor):
    """Readable name of a processor function, partial or callable object"""
    func = getattr(processor, 'func', processor)
    return getattr(func, '__name__', type(func).__name__)


class PostProcess:
    """
    Runs processor functions in order over a declaration tree

    Each processor is called as `processor(tree=tree, graph=graph, logger=logger)`
    and may mutate the tree in place or return a replacement source file /
    bundle node. A raising processor aborts the remaining pipeline.
    """

    @staticmethod
    def process(tree, processors, dependencies=False, log_start=False, logger=None) -> PostProcessResult:
        """
        Run the processors over a tree

        Args:
            tree: SOURCE_FILE or BUNDLE DeclarationNode
            processors: Iterable of processor functions
            dependencies: When True build the dependency graph passed to processors
            log_start: When True verbosely log each processor start
            logger: Logger handed to processors

        Returns:
            PostProcessResult
        """
        if not isinstance(tree, DeclarationNode) or tree.kind not in ROOT_KINDS:
            raise TypeError("PostProcess.process error: 'tree' is not a source file or bundle node.")

        if isinstance(processors, (str, bytes)) or not isinstance(processors, Iterable):
            raise TypeError("PostProcess.process error: 'processors' is not an iterable list.")

        if not isinstance(dependencies, bool):
            raise TypeError("PostProcess.process error: 'dependencies' is not a boolean.")

        if not isinstance(log_start, bool):
            raise TypeError("PostProcess.process error: 'log_start' is not a boolean.")

        logger = logger or get_logger()

        graph = GraphAnalysis.from_tree(tree) if dependencies else None

        for index, processor in enumerate(processors):
            if not callable(processor):
                logger.warning(f"PostProcess.process warning: skipping processor[{index}] as it is not a function.")
                continue

            name = processor_name(processor)

            if log_start and logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"PostProcess.process: Starting processor '{name}'.")

            try:
                result = processor(tree=tree, graph=graph, logger=logger)
            except Exception as e:
                logger.error(
                    f"PostProcess.process error: processor[{index}] '{name}' raised an error "
                    f"(aborting processing):\n{e}")
                logger.debug('Processor traceback', exc_info=True)
                return PostProcessResult(tree=tree, graph=graph, completed=False)

            if isinstance(result, DeclarationNode) and result.kind in ROOT_KINDS:
                tree = result

        return PostProcessResult(tree=tree, graph=graph, completed=True)

    @classmethod
    def process_file(cls, filepath, processors, dependencies=False, log_start=False, output=None,
                     logger=None, transformers=None) -> PostProcessResult:
        """
        Post process a declaration file in place or into an alternate output file

        Args:
            filepath: Source .d.ts file
            processors: Iterable of processor functions
            dependencies: When True build the dependency graph passed to processors
            log_start: When True verbosely log each processor start
            output: Alternate output file path
            logger: Logger handed to processors
            transformers: Tree transformers applied before the processors run

        Returns:
            PostProcessResult
        """
        if not isinstance(filepath, (str, os.PathLike)):
            raise TypeError("PostProcess.process_file error: 'filepath' is not a string.")

        if not os.path.isfile(filepath):
            raise TypeError(f"PostProcess.process_file error: 'filepath' does not exist:\n{filepath}")

        if output is not None and not isinstance(output, (str, os.PathLike)):
            raise TypeError("PostProcess.process_file error: 'output' is not a string.")

        logger = logger or get_logger()

        tree = DeclarationParser().parse_file(filepath)
        if transformers:
            tree = apply_transformers(tree, transformers)

        result = cls.process(tree, processors, dependencies=dependencies, log_start=log_start, logger=logger)

        # An aborted run leaves the file untouched
        if not result.completed:
            return result

        target = output or filepath
        try:
            with open(target, 'w', encoding='utf-8') as f:
                f.write(DeclarationPrinter().print(result.tree))
        except OSError as e:
            logger.error(f"PostProcess.process_file error: Failed to write postprocessing output to '{target}':\n{e}")

        return result
