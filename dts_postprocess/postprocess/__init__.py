"""
Post processing of bundled declaration trees: dependency graph, traversal and processors
"""
from .dependency_parser import (
    DEFAULT_KINDS,
    DependencyGraph,
    DependencyParser,
    GraphEdge,
    GraphVertex,
    build_graph,
)
from .graph_analysis import GraphAnalysis
from .post_process import PostProcess, PostProcessResult
from .processors import INHERIT_TAGS, output_graph, process_inherit_doc, propagate_inherited_signatures

__all__ = [
    'DEFAULT_KINDS',
    'DependencyGraph',
    'DependencyParser',
    'GraphAnalysis',
    'GraphEdge',
    'GraphVertex',
    'INHERIT_TAGS',
    'PostProcess',
    'PostProcessResult',
    'build_graph',
    'output_graph',
    'process_inherit_doc',
    'propagate_inherited_signatures',
]
