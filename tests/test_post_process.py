"""
Tests for the processor pipeline and file level post processing
"""
import functools
import json
import logging

import pytest

from dts_postprocess.postprocess import PostProcess, output_graph, process_inherit_doc
from dts_postprocess.transformers import filter_by_tags
from tests.helpers import BASE_CHILD_SOURCE, find_class, param_types


def test_processors_run_in_order_with_graph(parse, test_logger):
    tree = parse(BASE_CHILD_SOURCE)
    calls = []

    def first(tree, graph, logger):
        calls.append(('first', graph is not None, logger is test_logger))

    def second(**kwargs):
        calls.append(('second', sorted(kwargs)))

    result = PostProcess.process(tree, [first, second], dependencies=True, logger=test_logger)

    assert result.completed is True
    assert result.tree is tree
    assert calls == [('first', True, True), ('second', ['graph', 'logger', 'tree'])]
    assert sorted(result.graph.nodes) == ['Base', 'Child']


def test_graph_only_built_when_requested(parse, test_logger):
    seen = []

    PostProcess.process(parse(BASE_CHILD_SOURCE), [lambda **kw: seen.append(kw['graph'])], logger=test_logger)

    assert seen == [None]


def test_inherit_doc_processor(parse, test_logger):
    tree = parse(BASE_CHILD_SOURCE)

    result = PostProcess.process(tree, [process_inherit_doc], dependencies=True, logger=test_logger)

    assert param_types(find_class(result.tree, 'Child').get_method('foo')) == ['number', 'string']


def test_non_callable_processor_is_skipped(parse, test_logger, caplog):
    calls = []

    result = PostProcess.process(
        parse(BASE_CHILD_SOURCE), ['nope', lambda **kw: calls.append(1)], logger=test_logger)

    assert result.completed is True
    assert calls == [1]
    assert 'processor[0]' in caplog.text


def test_raising_processor_aborts_pipeline(parse, test_logger, caplog):
    calls = []

    def broken(**kwargs):
        calls.append('broken')
        raise RuntimeError('boom')

    def after(**kwargs):
        calls.append('after')

    result = PostProcess.process(parse(BASE_CHILD_SOURCE), [broken, after], logger=test_logger)

    assert result.completed is False
    assert calls == ['broken']
    errors = [record for record in caplog.records if record.levelname == 'ERROR']
    assert len(errors) == 1
    assert "processor[0] 'broken'" in errors[0].getMessage()
    assert 'boom' in errors[0].getMessage()


def test_processor_may_replace_tree(parse, test_logger):
    replacement = parse('export declare class Other {}')

    result = PostProcess.process(parse(BASE_CHILD_SOURCE), [lambda **kw: replacement], logger=test_logger)

    assert result.tree is replacement


def test_partial_processor_name_is_logged(parse, test_logger, caplog):
    def failing(tree, graph, logger, extra):
        raise ValueError(extra)

    PostProcess.process(parse(BASE_CHILD_SOURCE), [functools.partial(failing, extra='bad')], logger=test_logger)

    assert "'failing'" in caplog.text


@pytest.mark.parametrize('kwargs', [
    {'tree': 'source'},
    {'processors': 42},
    {'processors': 'abc'},
    {'dependencies': 'yes'},
    {'log_start': 1},
])
def test_configuration_errors(parse, kwargs):
    arguments = {'tree': parse('export declare class A {}'), 'processors': []}
    arguments.update(kwargs)

    with pytest.raises(TypeError):
        PostProcess.process(**arguments)


def test_process_file_writes_output(tmp_path, test_logger):
    source_path = tmp_path / 'index.d.ts'
    source_path.write_text(
        '/** @internal */\nexport declare function hidden(): void;\n' + BASE_CHILD_SOURCE, encoding='utf-8')
    output_path = tmp_path / 'out.d.ts'
    graph_path = tmp_path / 'graph.json'

    result = PostProcess.process_file(
        str(source_path),
        [process_inherit_doc, output_graph(str(graph_path))],
        dependencies=True,
        output=str(output_path),
        logger=test_logger,
        transformers=[filter_by_tags('internal')]
    )

    assert result.completed is True
    text = output_path.read_text(encoding='utf-8')
    assert 'hidden' not in text
    assert 'foo(a: number, b: string): void;' in text
    assert '/** @inheritDoc */' in text

    graph = json.loads(graph_path.read_text(encoding='utf-8'))
    assert graph['edges'] == [{'source': 'Base', 'target': 'Child'}]

    # Source left untouched when an output path is given
    assert 'hidden' in source_path.read_text(encoding='utf-8')


def test_process_file_in_place(tmp_path, test_logger):
    source_path = tmp_path / 'index.d.ts'
    source_path.write_text(BASE_CHILD_SOURCE, encoding='utf-8')

    PostProcess.process_file(source_path, [process_inherit_doc], dependencies=True, logger=test_logger)

    assert 'foo(a: number, b: string): void;' in source_path.read_text(encoding='utf-8')


def test_process_file_aborted_run_does_not_write(tmp_path, test_logger):
    source_path = tmp_path / 'index.d.ts'
    source_path.write_text(BASE_CHILD_SOURCE, encoding='utf-8')

    def broken(**kwargs):
        raise RuntimeError('boom')

    result = PostProcess.process_file(source_path, [broken], logger=test_logger)

    assert result.completed is False
    assert source_path.read_text(encoding='utf-8') == BASE_CHILD_SOURCE


def test_process_file_missing(tmp_path):
    with pytest.raises(TypeError):
        PostProcess.process_file(str(tmp_path / 'missing.d.ts'), [])


def test_output_graph_without_graph_warns(parse, test_logger, caplog, tmp_path):
    processor = output_graph(str(tmp_path / 'graph.json'))

    PostProcess.process(parse(BASE_CHILD_SOURCE), [processor], logger=test_logger)

    assert 'No dependency graph' in caplog.text
    assert not (tmp_path / 'graph.json').exists()


def test_processors_default_to_package_logger(caplog, tmp_path):
    processor = output_graph(str(tmp_path / 'graph.json'))

    with caplog.at_level(logging.WARNING, logger='dts_postprocess'):
        processor(tree=None, graph=None)

    assert [record.name for record in caplog.records] == ['dts_postprocess']
