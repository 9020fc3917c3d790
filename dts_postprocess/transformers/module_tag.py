"""
Collect `@module` / `@packageDocumentation` comment blocks
"""
from .base_transformer import KEEP, make_transformer

MODULE_TAGS = frozenset({'module', 'packageDocumentation'})


def preserve_module_tag(collected, file_name):
    """
    Create a transformer collecting module level comment blocks

    Args:
        collected: List receiving `{"file_name", "comment"}` entries
        file_name: Only blocks of the source file with this name are collected

    Returns:
        TreeTransformer
    """
    if not isinstance(collected, list):
        raise TypeError("preserve_module_tag error: 'collected' is not a list.")

    def handler(ctx):
        if ctx.source_file.file_name != file_name:
            return KEEP

        if ctx.last_parsed.has_tag(MODULE_TAGS):
            collected.append({'file_name': ctx.source_file.file_name, 'comment': ctx.last_comment})

        return KEEP

    return make_transformer(handler)
