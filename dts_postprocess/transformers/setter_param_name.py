"""
Copy the first `@param` name of a setter's JSDoc block to its parameter
"""
from dts_postprocess.models.declaration_node import NodeKind
from .base_transformer import KEEP, Replace, make_transformer


def _first_param_name(block):
    for entry in block.iter_tags('param'):
        if entry.name:
            return entry.name
    return None


def _rename_setter_param(ctx):
    node = ctx.node
    if node.kind != NodeKind.METHOD or node.keyword != 'set':
        return KEEP

    name = _first_param_name(ctx.last_parsed)
    params = node.parameters
    if name is None or not params or params[0].name == name:
        return KEEP

    renamed = params[0].copy_with(name=name)
    children = [renamed if child is params[0] else child for child in node.children]
    return Replace(node.with_children(children))


def setter_param_name():
    """
    Create a transformer renaming setter parameters after their `@param` tag

    Emitted setters may carry a parameter name differing from the documented
    one, which confuses documentation tooling matching `@param` tags.

    Returns:
        TreeTransformer
    """
    return make_transformer(_rename_setter_param)
