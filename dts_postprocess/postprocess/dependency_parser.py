"""
Parse the top level declarations of a declaration tree for inheritance data
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from dts_postprocess.models.declaration_node import (
    DeclarationNode,
    NodeKind,
    ROOT_KINDS,
    heritage_name,
    iter_source_files,
)

logger = logging.getLogger(__name__)

# Declaration kinds included in the dependency graph by default
DEFAULT_KINDS = frozenset({
    NodeKind.CLASS,
    NodeKind.FUNCTION,
    NodeKind.INTERFACE,
    NodeKind.TYPE_ALIAS,
    NodeKind.VARIABLE,
})

# Kinds whose heritage produces edges
HIERARCHY_KINDS = frozenset({NodeKind.CLASS, NodeKind.INTERFACE})


@dataclass
class GraphVertex:
    """A graph vertex; `node` is None for names with no declaration in the tree"""
    id: str
    type: str
    node: Optional[DeclarationNode] = None

    def to_json(self):
        return {'id': self.id, 'type': self.type}


@dataclass(frozen=True)
class GraphEdge:
    """A `parent -> child` inheritance edge"""
    source: str
    target: str

    def to_json(self):
        return {'source': self.source, 'target': self.target}


@dataclass
class DependencyGraph:
    """Inheritance graph and the node registry it refers to"""
    vertices: Dict[str, GraphVertex] = field(default_factory=dict)
    edges: List[GraphEdge] = field(default_factory=list)
    registry: Dict[str, DeclarationNode] = field(default_factory=dict)  # last declaration per name
    sources: Dict[str, DeclarationNode] = field(default_factory=dict)  # name -> owning source file
    root: Optional[DeclarationNode] = None

    def add_vertex(self, name, kind, node=None):
        vertex = self.vertices.get(name)
        if vertex is None:
            vertex = GraphVertex(id=name, type=kind.value, node=node)
            self.vertices[name] = vertex
        elif node is not None:
            vertex.type = kind.value
            vertex.node = node
        return vertex

    def add_edge(self, parent, child):
        edge = GraphEdge(source=parent, target=child)
        if edge not in self.edges:
            self.edges.append(edge)
        return edge

    def register(self, node, source_file):
        # Last declaration with a given name wins
        self.registry[node.name] = node
        self.sources[node.name] = source_file
        self.add_vertex(node.name, node.kind, node)

    def replace_declaration(self, old, new):
        """
        Swap a registered top level declaration for an updated copy

        Only the root object is updated in place. The source file holding the
        declaration is copied, so trees sharing it with the root (the input of
        a copy-on-write transformer) keep the old declaration.

        Args:
            old: Registered DeclarationNode
            new: Its replacement
        """
        source_file = self.sources.get(old.name)
        if source_file is None:
            return

        children = [new if child is old else child for child in source_file.children]

        if source_file is self.root:
            source_file.children = children
            updated_file = source_file
        else:
            updated_file = source_file.copy_with(children=children)
            if self.root is not None and self.root.kind == NodeKind.BUNDLE:
                self.root.children = [updated_file if child is source_file else child
                                      for child in self.root.children]

        for name in list(self.sources):
            if self.sources[name] is source_file:
                self.sources[name] = updated_file

        for name in list(self.registry):
            if self.registry[name] is old:
                self.registry[name] = new

        vertex = self.vertices.get(old.name)
        if vertex is not None and vertex.node is old:
            vertex.node = new


class DependencyParser:
    """
    Builds the inheritance graph of a declaration tree

    Only top level declarations are considered; nested namespaces are not
    traversed. Malformed heritage never raises: the declaration is simply
    registered without an edge.
    """

    @classmethod
    def parse(cls, tree, kinds=DEFAULT_KINDS) -> DependencyGraph:
        """
        Parse a source file or bundle

        Args:
            tree: SOURCE_FILE or BUNDLE DeclarationNode
            kinds: Declaration kinds to include

        Returns:
            DependencyGraph
        """
        if not isinstance(tree, DeclarationNode) or tree.kind not in ROOT_KINDS:
            raise TypeError("DependencyParser.parse error: 'tree' is not a source file or bundle node.")

        kinds = frozenset(NodeKind(kind) for kind in kinds)
        graph = DependencyGraph(root=tree)

        for source_file in iter_source_files(tree):
            for node in source_file.children:
                if node.kind not in kinds or not node.name:
                    continue

                graph.register(node, source_file)

                if node.kind in HIERARCHY_KINDS:
                    cls._extract_inheritance(node, graph)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"[DependencyParser] {len(graph.vertices)} vertices, {len(graph.edges)} edges")

        return graph

    @staticmethod
    def _extract_inheritance(node, graph):
        if node.kind == NodeKind.CLASS:
            base = node.base_class_name()
            parents = [base] if base else []
        else:
            parents = [heritage_name(text) for text in node.heritage_types('extends')]

        for parent in parents:
            if not parent or parent == node.name:
                logger.debug(f"[DependencyParser] Skipping heritage of '{node.name}': {parent!r}")
                continue

            # Undeclared parents get a vertex typed after the child
            graph.add_vertex(parent, node.kind)
            graph.add_edge(parent, node.name)


def build_graph(tree, kinds=DEFAULT_KINDS) -> DependencyGraph:
    """Build the inheritance graph of a source file or bundle"""
    return DependencyParser.parse(tree, kinds)
