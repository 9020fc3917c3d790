"""
Generic declaration tree transformer ("meta-transformer")

A transformer walks a source file or bundle pre-order and depth-first,
invoking a handler for each node. The handler answers with a directive:

    KEEP           -> leave the node and continue into its children
    DELETE         -> remove the node and its subtree
    Replace(node)  -> substitute the node; its original subtree is not visited

Returning None from a handler is the same as KEEP. The input tree is never
modified; changed nodes are copied along the path to the root.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from dts_postprocess.models.comment_block import CommentBlock
from dts_postprocess.models.declaration_node import DeclarationNode, NodeKind, ROOT_KINDS
from dts_postprocess.parsers.comment_parser import parse_leading_comments


class _Keep:
    def __repr__(self):
        return 'KEEP'


class _Delete:
    def __repr__(self):
        return 'DELETE'


KEEP = _Keep()
DELETE = _Delete()


@dataclass(frozen=True)
class Replace:
    """Directive substituting the visited node"""
    node: DeclarationNode


@dataclass
class TransformContext:
    """Data handed to transformer handlers for one node"""
    node: DeclarationNode
    source_file: DeclarationNode
    source: bytes
    comments: List[str] = field(default_factory=list)
    parsed: List[CommentBlock] = field(default_factory=list)
    last_comment: Optional[str] = None
    last_parsed: Optional[CommentBlock] = None
    state: Any = None


def _check_callable(value, name, optional=True):
    if value is None and optional:
        return
    if not callable(value):
        raise TypeError(f"TreeTransformer error: '{name}' is not a function.")


class TreeTransformer:
    """
    Reusable declaration tree transformer

    Args:
        handler: Called with a TransformContext, returns a directive
        post_handler: Called as post_handler(tree, state) once after the walk;
            a returned source file / bundle node replaces the walked tree
        node_test: Called with a TransformContext; the handler only runs when it returns True
        state_factory: Creates fresh per-invocation state exposed as `ctx.state`
        parse_comments: When True the handler is only invoked for nodes with an
            active JSDoc block and the context carries the parsed comments
    """

    def __init__(
        self,
        handler: Callable,
        post_handler: Optional[Callable] = None,
        node_test: Optional[Callable] = None,
        state_factory: Optional[Callable] = None,
        parse_comments: bool = True
    ):
        _check_callable(handler, 'handler', optional=False)
        _check_callable(post_handler, 'post_handler')
        _check_callable(node_test, 'node_test')
        _check_callable(state_factory, 'state_factory')

        self.handler = handler
        self.post_handler = post_handler
        self.node_test = node_test
        self.state_factory = state_factory
        self.parse_comments = parse_comments

    def __call__(self, tree):
        return self.transform(tree)

    def transform(self, tree):
        """
        Transform a source file or bundle

        Args:
            tree: SOURCE_FILE or BUNDLE DeclarationNode

        Returns:
            The transformed tree (the input when nothing changed)
        """
        if not isinstance(tree, DeclarationNode) or tree.kind not in ROOT_KINDS:
            raise TypeError("TreeTransformer.transform error: 'tree' is not a source file or bundle node.")

        state = self.state_factory() if self.state_factory else None

        if tree.kind == NodeKind.SOURCE_FILE:
            walked = self._visit_root(tree, state)
        else:
            # Each source file of a bundle is walked on its own
            walked = tree.with_children(
                self._visit_root(child, state) if child.kind == NodeKind.SOURCE_FILE else child
                for child in tree.children
            )

        if self.post_handler is not None:
            processed = self.post_handler(walked, state)
            if isinstance(processed, DeclarationNode) and processed.kind in ROOT_KINDS:
                return processed

        return walked

    def _visit_root(self, source_file, state):
        result = self._visit(source_file, source_file, state)
        if result is None:
            raise ValueError(f"TreeTransformer error: handler deleted source file '{source_file.file_name}'.")
        return result

    def _visit(self, node, source_file, state):
        ctx = self._context(node, source_file, state)

        if ctx is not None and (self.node_test is None or self.node_test(ctx)):
            directive = self.handler(ctx)

            if directive is None or directive is KEEP:
                pass
            elif directive is DELETE:
                return None
            elif isinstance(directive, Replace):
                return directive.node
            else:
                raise TypeError(f"TreeTransformer error: handler returned an unknown directive: {directive!r}")

        children = []
        for child in node.children:
            visited = self._visit(child, source_file, state)
            if visited is not None:
                children.append(visited)

        return node.with_children(children)

    def _context(self, node, source_file, state):
        ctx = TransformContext(node=node, source_file=source_file, source=source_file.source, state=state)

        if not self.parse_comments:
            return ctx

        parsed = parse_leading_comments(node, source_file.source)
        if parsed.last_parsed is None:
            return None

        ctx.comments = parsed.comments
        ctx.parsed = parsed.parsed
        ctx.last_comment = parsed.last_comment
        ctx.last_parsed = parsed.last_parsed
        return ctx


def make_transformer(handler, post_handler=None, node_test=None, state_factory=None):
    """
    Create a JSDoc driven transformer

    The handler is invoked for each node that has an active JSDoc block.

    Returns:
        TreeTransformer
    """
    return TreeTransformer(handler, post_handler, node_test, state_factory, parse_comments=True)


def make_node_transformer(handler, post_handler=None, node_test=None, state_factory=None):
    """
    Create a transformer invoking the handler for every node, comments or not

    Returns:
        TreeTransformer
    """
    return TreeTransformer(handler, post_handler, node_test, state_factory, parse_comments=False)


def apply_transformers(tree, transformers):
    """Run transformers in order, each seeing the previous result"""
    for transformer in transformers:
        tree = transformer(tree)
    return tree
