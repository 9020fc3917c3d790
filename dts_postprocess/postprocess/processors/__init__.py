"""
Processors run by the post processing pipeline
"""
from .inherit_doc import INHERIT_TAGS, process_inherit_doc, propagate_inherited_signatures
from .output_graph import output_graph

__all__ = [
    'INHERIT_TAGS',
    'output_graph',
    'process_inherit_doc',
    'propagate_inherited_signatures',
]
