"""
Tests for graph traversal
"""
import pytest

from dts_postprocess.postprocess import GraphAnalysis

HIERARCHY = """\
export declare class A {}
export declare class B extends A {}
export declare class C extends A {}
export declare class D extends B {}
export declare const v: number;
"""

DIAMOND = """\
export interface Left {}
export interface Right {}
export interface Both extends Left, Right {}
"""


@pytest.fixture
def graph(parse):
    return GraphAnalysis.from_tree(parse(HIERARCHY))


def _record(visits):
    def visit(vertex, edge, parent, index, depth):
        visits.append((vertex.id, parent.id if parent else None, depth))
    return visit


def test_roots(graph):
    assert [vertex.id for vertex in graph.roots()] == ['A', 'v']


def test_dfs_order_and_depth(graph):
    visits = []
    graph.dfs(_record(visits))

    assert visits == [
        ('A', None, 0), ('B', 'A', 1), ('D', 'B', 2), ('C', 'A', 1),
        ('v', None, 0),
    ]


def test_bfs_order_and_depth(graph):
    visits = []
    graph.bfs(_record(visits))

    assert visits == [
        ('A', None, 0), ('B', 'A', 1), ('C', 'A', 1), ('D', 'B', 2),
        ('v', None, 0),
    ]


def test_visit_receives_edge_and_index(graph):
    records = []
    graph.dfs(lambda v, e, u, i, depth: records.append((v.id, e.source if e else None, i)), type_filter='class')

    assert records == [('A', None, 0), ('B', 'A', 1), ('D', 'B', 2), ('C', 'A', 3)]


def test_type_filter_skips_visit_but_traverses(parse):
    graph = GraphAnalysis.from_tree(parse(
        'export interface Root {}\n'
        'export interface Mid extends Root {}\n'
        'export declare const x: number;\n'
    ))
    visits = []

    graph.dfs(_record(visits), type_filter={'variable'})
    assert visits == [('x', None, 0)]

    visits.clear()
    graph.dfs(_record(visits), type_filter='interface')
    assert visits == [('Root', None, 0), ('Mid', 'Root', 1)]


def test_vertex_reachable_from_two_roots_is_visited_per_root(parse):
    """No dedup across roots: diamonds are visited once per reaching root."""
    graph = GraphAnalysis.from_tree(parse(DIAMOND))
    visits = []

    graph.dfs(_record(visits))

    assert visits == [
        ('Left', None, 0), ('Both', 'Left', 1),
        ('Right', None, 0), ('Both', 'Right', 1),
    ]


def test_visit_returning_true_stops_current_root(graph):
    visits = []

    def visit(vertex, edge, parent, index, depth):
        visits.append(vertex.id)
        return vertex.id == 'B'

    graph.bfs(visit)

    assert visits == ['A', 'B', 'v']


def test_undirected_follows_edges_backwards(parse):
    graph = GraphAnalysis.from_tree(parse(DIAMOND))
    visits = []

    graph.bfs(_record(visits), directed=False)

    assert visits[:3] == [('Left', None, 0), ('Both', 'Left', 1), ('Right', 'Both', 2)]


def test_nodes_registry(graph):
    assert graph.nodes['B'].base_class_name() == 'A'
    assert len(graph.vertices) == 5
    assert len(graph.edges) == 3


def test_configuration_errors(graph):
    with pytest.raises(TypeError):
        graph.dfs('visit')
    with pytest.raises(TypeError):
        graph.bfs(lambda *args: None, directed='yes')
    with pytest.raises(TypeError):
        graph.dfs(lambda *args: None, type_filter=['class'])
    with pytest.raises(TypeError):
        GraphAnalysis({'vertices': []})
