"""
Declaration tree transformers
"""
from .base_transformer import (
    DELETE,
    KEEP,
    Replace,
    TransformContext,
    TreeTransformer,
    apply_transformers,
    make_node_transformer,
    make_transformer,
)
from .implements_imports import synthesize_implements_imports
from .module_tag import preserve_module_tag
from .private_static import remove_private_static
from .setter_param_name import setter_param_name
from .tag_filter import filter_by_tags

__all__ = [
    'DELETE',
    'KEEP',
    'Replace',
    'TransformContext',
    'TreeTransformer',
    'apply_transformers',
    'filter_by_tags',
    'make_node_transformer',
    'make_transformer',
    'preserve_module_tag',
    'remove_private_static',
    'setter_param_name',
    'synthesize_implements_imports',
]
