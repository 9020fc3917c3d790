"""
Traversal facade over the inheritance graph
"""
from collections import deque
from typing import Dict, List

from .dependency_parser import DEFAULT_KINDS, DependencyGraph, DependencyParser


class GraphAnalysis:
    """
    Breadth / depth first traversal of a DependencyGraph with a visitor callback

    Visitors are called as `visit(vertex, edge, parent, index, depth)` where
    `edge` and `parent` are None for the root, `index` counts the visits of the
    current traversal and `depth` is the distance from the root. A visitor
    returning True stops the traversal from the current root.

    Every root (vertex without incoming edges) is traversed on its own, so a
    vertex reachable from two roots is visited once per root.
    """

    def __init__(self, graph: DependencyGraph):
        if not isinstance(graph, DependencyGraph):
            raise TypeError("GraphAnalysis error: 'graph' is not a DependencyGraph.")

        self.graph = graph

        self._successors: Dict[str, List] = {name: [] for name in graph.vertices}
        self._predecessors: Dict[str, List] = {name: [] for name in graph.vertices}
        for edge in graph.edges:
            self._successors[edge.source].append((edge, edge.target))
            self._predecessors[edge.target].append((edge, edge.source))

    @classmethod
    def from_tree(cls, tree, kinds=DEFAULT_KINDS):
        """Build the graph of a source file or bundle and wrap it"""
        return cls(DependencyParser.parse(tree, kinds))

    @property
    def nodes(self):
        """Registry mapping declared names to declaration nodes"""
        return self.graph.registry

    @property
    def vertices(self):
        return list(self.graph.vertices.values())

    @property
    def edges(self):
        return list(self.graph.edges)

    def roots(self):
        """Vertices with no incoming edges (self loops ignored)"""
        return [
            vertex for name, vertex in self.graph.vertices.items()
            if not any(source != name for _, source in self._predecessors[name])
        ]

    def bfs(self, visit, directed=True, type_filter=None):
        """
        Perform a breadth first search of the graph

        Args:
            visit: Visitor function
            directed: When True only follow edges from parent to child
            type_filter: A vertex type or set of types passed to `visit`
        """
        visit = self._prepare('bfs', visit, directed, type_filter)

        for root in self.roots():
            seen = {root.id}
            queue = deque([(root, None, None, 0)])
            index = 0

            while queue:
                vertex, edge, parent, depth = queue.popleft()
                if visit(vertex, edge, parent, index, depth) is True:
                    break
                index += 1

                for next_edge, neighbor in self._neighbors(vertex.id, directed):
                    if neighbor not in seen:
                        seen.add(neighbor)
                        queue.append((self.graph.vertices[neighbor], next_edge, vertex, depth + 1))

    def dfs(self, visit, directed=True, type_filter=None):
        """
        Perform a depth first search of the graph

        Args:
            visit: Visitor function
            directed: When True only follow edges from parent to child
            type_filter: A vertex type or set of types passed to `visit`
        """
        visit = self._prepare('dfs', visit, directed, type_filter)

        for root in self.roots():
            seen = set()
            stack = [(root, None, None, 0)]
            index = 0

            while stack:
                vertex, edge, parent, depth = stack.pop()
                if vertex.id in seen:
                    continue
                seen.add(vertex.id)

                if visit(vertex, edge, parent, index, depth) is True:
                    break
                index += 1

                # Reversed so the first declared child is visited first
                for next_edge, neighbor in reversed(self._neighbors(vertex.id, directed)):
                    if neighbor not in seen:
                        stack.append((self.graph.vertices[neighbor], next_edge, vertex, depth + 1))

    def to_json(self):
        """
        Serializable form of the graph

        Returns:
            {"vertices": [{"id", "type"}], "edges": [{"source", "target"}]}
        """
        return {
            'vertices': [vertex.to_json() for vertex in self.graph.vertices.values()],
            'edges': [edge.to_json() for edge in self.graph.edges],
        }

    def _neighbors(self, name, directed):
        if directed:
            return self._successors[name]
        return self._successors[name] + self._predecessors[name]

    @staticmethod
    def _prepare(operation, visit, directed, type_filter):
        if not callable(visit):
            raise TypeError(f"GraphAnalysis.{operation} error: 'visit' is not a function.")

        if not isinstance(directed, bool):
            raise TypeError(f"GraphAnalysis.{operation} error: 'directed' is not a boolean.")

        if type_filter is None:
            return visit

        if isinstance(type_filter, str):
            wanted = {str(getattr(type_filter, 'value', type_filter))}
        elif isinstance(type_filter, (set, frozenset)):
            wanted = {str(getattr(entry, 'value', entry)) for entry in type_filter}
        else:
            raise TypeError(f"GraphAnalysis.{operation} error: 'type_filter' is not a string or set of strings.")

        # Filtered vertices are still traversed, only the visit is skipped
        def filtered(vertex, edge, parent, index, depth):
            if vertex.type in wanted:
                return visit(vertex, edge, parent, index, depth)
            return None

        return filtered
