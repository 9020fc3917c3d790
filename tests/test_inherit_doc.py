"""
Tests for propagating ancestor parameter types to `@inheritDoc` members
"""
import logging

import pytest

from dts_postprocess.models.declaration_node import create_bundle
from dts_postprocess.postprocess import GraphAnalysis, process_inherit_doc, propagate_inherited_signatures
from dts_postprocess.postprocess.processors.inherit_doc import (
    PendingMember,
    collect_pending_members,
    resolve_pending_members,
)
from dts_postprocess.transformers import filter_by_tags
from tests.helpers import (
    ARITY_MISMATCH_SOURCE,
    BASE_CHILD_SOURCE,
    MULTI_LEVEL_SOURCE,
    find_class,
    param_types,
    warning_messages,
)


def _propagate(tree, logger):
    propagate_inherited_signatures(GraphAnalysis.from_tree(tree), logger)
    return tree


def test_class_tag_copies_parent_types_without_warnings(parse, printer, test_logger, caplog):
    """Child.foo(a: any, b: any) becomes (a: number, b: string)."""
    tree = _propagate(parse(BASE_CHILD_SOURCE), test_logger)

    foo = find_class(tree, 'Child').get_method('foo')
    assert param_types(foo) == ['number', 'string']
    assert 'foo(a: number, b: string): void;' in printer.print(tree)
    assert warning_messages(caplog) == []


def test_arity_mismatch_leaves_member_and_warns_once(parse, test_logger, caplog):
    tree = _propagate(parse(ARITY_MISMATCH_SOURCE), test_logger)

    foo = find_class(tree, 'Child').get_method('foo')
    assert param_types(foo) == ['any']

    messages = warning_messages(caplog)
    assert len(messages) == 1
    assert 'foo' in messages[0]


def test_arity_gate_for_member_tag(parse, test_logger, caplog):
    source = (
        'export declare class Base {\n'
        '    foo(a: number, b: string): void;\n'
        '}\n'
        'export declare class Child extends Base {\n'
        '    /** @inheritDoc */\n'
        '    foo(x: any): void;\n'
        '}\n'
    )

    tree = _propagate(parse(source), test_logger)

    assert param_types(find_class(tree, 'Child').get_method('foo')) == ['any']
    assert [message for message in warning_messages(caplog) if 'foo' in message] == warning_messages(caplog)
    assert len(warning_messages(caplog)) == 1


def test_first_matching_ancestor_across_levels(parse, test_logger, caplog):
    """C.foo resolves against A even though B declares no foo."""
    tree = _propagate(parse(MULTI_LEVEL_SOURCE), test_logger)

    assert param_types(find_class(tree, 'C').get_method('foo')) == ['number']
    assert warning_messages(caplog) == []


def test_skips_mismatched_level_and_continues_upward(parse, test_logger, caplog):
    source = (
        'export declare class A {\n'
        '    foo(n: number): void;\n'
        '}\n'
        'export declare class B extends A {\n'
        '    foo(n: string, m: string): void;\n'
        '}\n'
        'export declare class C extends B {\n'
        '    /** @inheritdoc */\n'
        '    foo(n: any): void;\n'
        '}\n'
    )

    tree = _propagate(parse(source), test_logger)

    assert param_types(find_class(tree, 'C').get_method('foo')) == ['number']
    assert warning_messages(caplog) == []


def test_constructor_propagation(parse, test_logger, caplog):
    source = (
        'export declare class Base {\n'
        '    constructor(options: Options, id?: number);\n'
        '}\n'
        'export declare class Child extends Base {\n'
        '    /** @inheritDoc */\n'
        '    constructor(options: any, id?: any);\n'
        '}\n'
    )

    tree = _propagate(parse(source), test_logger)

    assert param_types(find_class(tree, 'Child').get_constructor()) == ['Options', 'number']
    assert warning_messages(caplog) == []


def test_member_tag_without_ancestor_member_warns(parse, test_logger, caplog):
    source = (
        'export declare class Base {}\n'
        'export declare class Child extends Base {\n'
        '    /** @inheritDoc */\n'
        '    missing(a: any): void;\n'
        '    /** @inheritDoc */\n'
        '    other(): void;\n'
        '}\n'
    )

    _propagate(parse(source), test_logger)

    messages = warning_messages(caplog)
    assert len(messages) == 1
    assert 'missing, other' in messages[0]


def test_class_tag_ignores_members_unknown_to_ancestors(parse, test_logger, caplog):
    source = (
        'export declare class Base {\n'
        '    foo(a: number): void;\n'
        '}\n'
        '/** @inheritDoc */\n'
        'export declare class Child extends Base {\n'
        '    foo(a: any): void;\n'
        '    extra(b: any): void;\n'
        '}\n'
    )

    tree = _propagate(parse(source), test_logger)

    child = find_class(tree, 'Child')
    assert param_types(child.get_method('foo')) == ['number']
    assert param_types(child.get_method('extra')) == ['any']
    assert warning_messages(caplog) == []


def test_roots_are_never_rewritten(parse, test_logger):
    source = (
        'export declare class Root {\n'
        '    /** @inheritDoc */\n'
        '    foo(a: any): void;\n'
        '}\n'
    )

    tree = _propagate(parse(source), test_logger)

    assert param_types(find_class(tree, 'Root').get_method('foo')) == ['any']


def test_propagation_is_idempotent(parse, printer, test_logger, caplog):
    tree = parse(MULTI_LEVEL_SOURCE)
    graph = GraphAnalysis.from_tree(tree)

    propagate_inherited_signatures(graph, test_logger)
    printed = printer.print(tree)

    caplog.clear()
    propagate_inherited_signatures(graph, test_logger)

    assert printer.print(tree) == printed
    assert warning_messages(caplog) == []


def test_cyclic_heritage_stops_walk(parse, test_logger, caplog):
    tree = parse(
        'export declare class A extends B {\n'
        '    /** @inheritDoc */\n'
        '    foo(a: any): void;\n'
        '}\n'
        'export declare class B extends A {}\n'
    )
    graph = GraphAnalysis.from_tree(tree)
    node = find_class(tree, 'A')

    pending = collect_pending_members(node, tree.source, {'inheritDoc'})
    assert [entry.label for entry in pending] == ['foo']

    resolve_pending_members(node, pending, graph, test_logger)

    messages = warning_messages(caplog)
    assert any('Cyclic heritage' in message for message in messages)
    assert any('foo' in message and 'Failed to find' in message for message in messages)


def test_tree_before_transform_is_left_untouched(parse, test_logger):
    original = parse('/** @internal */\nexport declare function hidden(): void;\n' + BASE_CHILD_SOURCE)
    filtered = filter_by_tags('internal')(original)
    assert filtered is not original

    graph = GraphAnalysis.from_tree(filtered)
    propagate_inherited_signatures(graph, test_logger)

    assert param_types(find_class(original, 'Child').get_method('foo')) == ['any', 'any']
    assert param_types(find_class(filtered, 'Child').get_method('foo')) == ['number', 'string']
    assert graph.nodes['Child'] is find_class(filtered, 'Child')


def test_shared_bundle_source_file_is_copied(parse, test_logger):
    original = create_bundle([
        parse('/** @internal */\nexport declare function hidden(): void;\n', 'a.d.ts'),
        parse(BASE_CHILD_SOURCE, 'b.d.ts'),
    ])
    filtered = filter_by_tags('internal')(original)
    assert filtered.children[1] is original.children[1]

    propagate_inherited_signatures(GraphAnalysis.from_tree(filtered), test_logger)

    assert filtered.children[1] is not original.children[1]
    assert param_types(find_class(original.children[1], 'Child').get_method('foo')) == ['any', 'any']
    assert param_types(find_class(filtered.children[1], 'Child').get_method('foo')) == ['number', 'string']


def test_matching_overload_is_used(parse, test_logger, caplog):
    source = (
        'export declare class Base {\n'
        '    foo(a: number): void;\n'
        '    foo(a: number, b: string): void;\n'
        '}\n'
        'export declare class Child extends Base {\n'
        '    /** @inheritDoc */\n'
        '    foo(a: any, b: any): void;\n'
        '}\n'
    )

    tree = _propagate(parse(source), test_logger)

    assert param_types(find_class(tree, 'Child').get_method('foo')) == ['number', 'string']
    assert warning_messages(caplog) == []


def test_overload_counts_reported_when_none_match(parse, test_logger, caplog):
    source = (
        'export declare class Base {\n'
        '    foo(a: number): void;\n'
        '    foo(a: number, b: string, c: boolean): void;\n'
        '}\n'
        'export declare class Child extends Base {\n'
        '    /** @inheritDoc */\n'
        '    foo(a: any, b: any): void;\n'
        '}\n'
    )

    _propagate(parse(source), test_logger)

    messages = warning_messages(caplog)
    assert len(messages) == 1
    assert 'Base: 1/3 != 2' in messages[0]


def test_process_inherit_doc_builds_graph_from_tree(parse, caplog):
    tree = parse(BASE_CHILD_SOURCE)

    with caplog.at_level(logging.DEBUG, logger='dts_postprocess'):
        process_inherit_doc(tree=tree)

    assert param_types(find_class(tree, 'Child').get_method('foo')) == ['number', 'string']
    assert any('Visited node: Child' in record.getMessage() for record in caplog.records)


def test_process_inherit_doc_custom_tags(parse, test_logger):
    source = BASE_CHILD_SOURCE.replace('@inheritDoc', '@override')
    tree = parse(source)

    process_inherit_doc(tree=tree, logger=test_logger)
    assert param_types(find_class(tree, 'Child').get_method('foo')) == ['any', 'any']

    process_inherit_doc(tree=tree, logger=test_logger, tags='override')
    assert param_types(find_class(tree, 'Child').get_method('foo')) == ['number', 'string']


def test_pending_member_label(parse):
    tree = parse('export declare class A {\n    constructor(a: any);\n}\n')

    assert PendingMember(find_class(tree, 'A').get_constructor(), strict=True).label == 'constructor'


def test_requires_tree_or_graph():
    with pytest.raises(TypeError):
        process_inherit_doc()
    with pytest.raises(TypeError):
        propagate_inherited_signatures('graph')
