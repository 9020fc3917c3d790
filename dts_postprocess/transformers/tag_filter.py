"""
Tag based declaration filter
"""
from collections.abc import Iterable

from .base_transformer import DELETE, KEEP, make_transformer


def filter_by_tags(tags):
    """
    Remove every node whose active JSDoc block carries one of the given tags

    This handles `@internal` by removing all declarations that are not part of
    the public API. Only the last (closest) comment block of a node is
    consulted; tags in earlier stacked blocks never trigger removal.

    Args:
        tags: A single tag name or an iterable of tag names

    Returns:
        TreeTransformer removing the tagged nodes
    """
    if isinstance(tags, str):
        wanted = frozenset({tags})
    elif isinstance(tags, Iterable):
        wanted = frozenset(tags)
        if not all(isinstance(tag, str) for tag in wanted):
            raise TypeError("filter_by_tags error: 'tags' contains a non string entry.")
    else:
        raise TypeError("filter_by_tags error: 'tags' is not a string or iterable list.")

    def handler(ctx):
        for entry in ctx.last_parsed.tags:
            if entry.tag in wanted:
                return DELETE
        return KEEP

    return make_transformer(handler)
