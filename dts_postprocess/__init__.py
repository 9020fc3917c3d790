"""
Post processing toolkit for TypeScript declaration (.d.ts) files
"""
from .config import PostProcessConfig
from .models import CommentBlock, DeclarationNode, NodeKind, TagEntry
from .parsers import DeclarationParser, parse_comment, parse_leading_comments
from .postprocess import (
    DependencyParser,
    GraphAnalysis,
    PostProcess,
    PostProcessResult,
    build_graph,
    output_graph,
    process_inherit_doc,
    propagate_inherited_signatures,
)
from .transformers import (
    DELETE,
    KEEP,
    Replace,
    filter_by_tags,
    make_node_transformer,
    make_transformer,
    synthesize_implements_imports,
)
from .utils import DeclarationPrinter, configure_logging, log_node

__version__ = '0.1.0'

__all__ = [
    'CommentBlock',
    'DELETE',
    'DeclarationNode',
    'DeclarationParser',
    'DeclarationPrinter',
    'DependencyParser',
    'GraphAnalysis',
    'KEEP',
    'NodeKind',
    'PostProcess',
    'PostProcessConfig',
    'PostProcessResult',
    'Replace',
    'TagEntry',
    'build_graph',
    'configure_logging',
    'filter_by_tags',
    'log_node',
    'make_node_transformer',
    'make_transformer',
    'output_graph',
    'parse_comment',
    'parse_leading_comments',
    'process_inherit_doc',
    'propagate_inherited_signatures',
    'synthesize_implements_imports',
]
