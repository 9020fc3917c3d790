"""
Remove compiler renamed private static members

When emitting declarations the compiler renames private static members to a
string such as `"__#3@#initialize"` (originally `#initialize()`) that stays in
the public declaration. Classes with private fields also receive a `#private;`
marker property.
"""
import re

from dts_postprocess.models.declaration_node import NodeKind
from .base_transformer import DELETE, KEEP, make_node_transformer

PRIVATE_STATIC_PATTERN = re.compile(r'__#\d+@#.*')
PRIVATE_MARKER = '#private'


def is_private_static(node):
    """Test if a member node has the shape of a renamed private static member"""
    if node.kind not in (NodeKind.PROPERTY, NodeKind.METHOD) or not node.name:
        return False

    if node.name == PRIVATE_MARKER:
        return True

    return 'static' in node.modifiers and PRIVATE_STATIC_PATTERN.search(node.name) is not None


def remove_private_static():
    """
    Create a transformer removing all private static members

    Returns:
        TreeTransformer
    """
    return make_node_transformer(lambda ctx: DELETE if is_private_static(ctx.node) else KEEP)
