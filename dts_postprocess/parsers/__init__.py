"""
Declaration source, comment and import type parsers
"""
from .comment_parser import get_leading_comments, parse_comment, parse_leading_comments
from .declaration_parser import DeclarationParser
from .import_type import ImportType, parse_import_bindings, parse_import_type, parse_import_types_from_block

__all__ = [
    'DeclarationParser',
    'ImportType',
    'get_leading_comments',
    'parse_comment',
    'parse_import_bindings',
    'parse_import_type',
    'parse_import_types_from_block',
    'parse_leading_comments',
]
