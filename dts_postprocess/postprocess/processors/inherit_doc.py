"""
Propagate ancestor parameter types to members tagged `@inheritDoc`

For every class reached below a root of the inheritance graph, methods and
the constructor whose active JSDoc block carries an inherit tag are resolved
against the ancestor chain (`extends` base, then its base, ...). The first
ancestor declaring a member (or overload) of the same name with the same
number of parameters wins: differing parameter types are copied from it.

Updated members are copies; the class holding them is swapped into the graph
root through `DependencyGraph.replace_declaration`, so trees sharing nodes
with the root are left untouched.

When the class itself carries the inherit tag all of its methods and its
constructor are candidates; those with no same named ancestor member are
skipped without a warning.
"""
import logging
from dataclasses import dataclass, field
from typing import List

from dts_postprocess.models.declaration_node import NodeKind
from dts_postprocess.parsers.comment_parser import parse_leading_comments
from dts_postprocess.postprocess.graph_analysis import GraphAnalysis
from dts_postprocess.utils.logger import get_logger
from dts_postprocess.utils.node_search import NodeSearch

INHERIT_TAGS = frozenset({'inheritDoc', 'inheritdoc'})


@dataclass
class PendingMember:
    """A method or constructor still requiring ancestor resolution"""
    member: object
    strict: bool
    found: bool = False  # an ancestor declares a member of the same name
    mismatches: List[str] = field(default_factory=list)

    @property
    def label(self):
        return 'constructor' if self.member.kind == NodeKind.CONSTRUCTOR else self.member.name


def process_inherit_doc(*, tree=None, graph=None, logger=None, tags=INHERIT_TAGS, **kwargs):
    """
    Processor propagating inherited signatures

    Args:
        tree: Declaration tree; used to build the graph when none is given
        graph: GraphAnalysis of the tree
        logger: Logger receiving warnings and verbose output
        tags: Tag names marking a member as inheriting from its ancestor
    """
    logger = logger or get_logger()

    if graph is None:
        if tree is None:
            raise TypeError("process_inherit_doc error: neither 'tree' nor 'graph' was provided.")
        graph = GraphAnalysis.from_tree(tree)

    propagate_inherited_signatures(graph, logger, tags)


def propagate_inherited_signatures(graph, logger=None, tags=INHERIT_TAGS):
    """
    Resolve inherit tagged members of all non root classes of the graph

    Updated classes replace their originals in the graph root and registry.

    Args:
        graph: GraphAnalysis of the tree
        logger: Logger receiving warnings and verbose output
        tags: Tag names marking a member as inheriting from its ancestor
    """
    if not isinstance(graph, GraphAnalysis):
        raise TypeError("propagate_inherited_signatures error: 'graph' is not a GraphAnalysis instance.")

    logger = logger or get_logger()
    tags = frozenset({tags}) if isinstance(tags, str) else frozenset(tags)

    def visit(vertex, edge, parent, index, depth):
        # Roots have no ancestor to inherit from
        if depth == 0:
            return None

        node = graph.nodes.get(vertex.id)
        if node is None:
            logger.warning(f"[process_inherit_doc] Declaration for graph id '{vertex.id}' could not be retrieved.")
            return None

        # Only classes are considered
        if node.kind != NodeKind.CLASS:
            return None

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"[process_inherit_doc] Visited node: {vertex.id} at depth: {depth} from parent: {parent.id}")

        source_file = graph.graph.sources.get(vertex.id)
        pending = collect_pending_members(node, source_file.source if source_file else b'', tags)
        if pending:
            updated = resolve_pending_members(node, pending, graph, logger)
            if updated is not node:
                graph.graph.replace_declaration(node, updated)

        return None

    graph.dfs(visit, directed=True)


def collect_pending_members(node, source, tags):
    """
    Methods and constructor of a class that inherit their signature

    Args:
        node: CLASS DeclarationNode
        source: Source bytes of the owning source file
        tags: Inherit tag names

    Returns:
        List of PendingMember in declaration order
    """
    class_tagged = _has_tag(node, source, tags)

    pending = []
    for member in node.children:
        if member.kind not in (NodeKind.METHOD, NodeKind.CONSTRUCTOR):
            continue

        if _has_tag(member, source, tags):
            pending.append(PendingMember(member, strict=True))
        elif class_tagged:
            pending.append(PendingMember(member, strict=False))

    return pending


def _has_tag(node, source, tags):
    block = parse_leading_comments(node, source).last_parsed
    return block is not None and block.has_tag(tags)


def _param_type(param):
    return param.type_text or 'any'


def _inherit_parameters(member, ancestor_member):
    """Copy of `member` with the differing parameter types of `ancestor_member`"""
    ancestor_params = iter(ancestor_member.parameters)

    children = []
    for child in member.children:
        if child.kind != NodeKind.PARAMETER:
            children.append(child)
            continue

        ancestor_param = next(ancestor_params)
        if _param_type(child) != _param_type(ancestor_param):
            child = child.copy_with(type_text=ancestor_param.type_text)
        children.append(child)

    return member.with_children(children)


def resolve_pending_members(node, pending, graph, logger):
    """
    Walk the ancestor chain of a class resolving its pending members

    The class is not modified; resolved members are swapped into a copy.

    Args:
        node: CLASS DeclarationNode
        pending: List of PendingMember; resolved entries are removed
        graph: GraphAnalysis providing the name registry
        logger: Logger receiving warnings

    Returns:
        The class node, or an updated copy when parameter types were inherited
    """
    is_verbose = logger.isEnabledFor(logging.DEBUG)

    if is_verbose:
        logger.debug(f"[process_inherit_doc] Processing class: {node.name}")

    replacements = {}
    visited = {node.name}
    current = node

    while pending:
        ancestor_name = current.base_class_name()
        if not ancestor_name:
            break

        if ancestor_name in visited:
            logger.warning(
                f"[process_inherit_doc] Cyclic heritage for class '{node.name}' at '{ancestor_name}'; stopping.")
            break
        visited.add(ancestor_name)

        ancestor = NodeSearch.base_class(graph.nodes, current)
        if ancestor is None or ancestor.kind != NodeKind.CLASS:
            break

        if is_verbose:
            logger.debug(f"[process_inherit_doc] Traversing parent class: {ancestor_name}")

        for entry in list(pending):
            overloads = NodeSearch.search_overloads(ancestor, entry.member)
            if not overloads:
                continue

            entry.found = True

            arity = len(entry.member.parameters)
            match = next((overload for overload in overloads if len(overload.parameters) == arity), None)

            if match is None:
                counts = '/'.join(str(len(overload.parameters)) for overload in overloads)
                entry.mismatches.append(f"{ancestor_name}: {counts} != {arity}")
                if is_verbose:
                    logger.debug(
                        f"[process_inherit_doc] Parent class method parameter lengths do not match for "
                        f"'{entry.label}' in '{ancestor_name}'.")
                continue

            updated = _inherit_parameters(entry.member, match)
            if updated is not entry.member:
                replacements[entry.member] = updated

            pending.remove(entry)

        current = ancestor

    unresolved = []
    for entry in pending:
        if not (entry.strict or entry.found):
            continue

        label = entry.label
        if entry.mismatches:
            label += f" (parameter lengths do not match: {', '.join(entry.mismatches)})"
        if label not in unresolved:
            unresolved.append(label)

    if unresolved:
        logger.warning(
            f"[process_inherit_doc] Failed to find parent implementations for methods in '{node.name}': "
            f"{', '.join(unresolved)}")

    return node.with_children(replacements.get(child, child) for child in node.children)
