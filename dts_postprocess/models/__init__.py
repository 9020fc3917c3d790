"""
Declaration tree and comment block models
"""
from .declaration_node import (
    DeclarationNode,
    HeritageClause,
    NodeKind,
    MEMBER_KINDS,
    ROOT_KINDS,
    create_bundle,
    create_source_file,
    heritage_name,
    iter_source_files,
)
from .comment_block import CommentBlock, ParsedLeadingComments, TagEntry

__all__ = [
    'DeclarationNode',
    'HeritageClause',
    'NodeKind',
    'MEMBER_KINDS',
    'ROOT_KINDS',
    'create_bundle',
    'create_source_file',
    'heritage_name',
    'iter_source_files',
    'CommentBlock',
    'ParsedLeadingComments',
    'TagEntry',
]
