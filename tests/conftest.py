"""
Shared fixtures for the declaration post processing tests
"""
import logging

import pytest

from dts_postprocess.parsers.declaration_parser import DeclarationParser
from dts_postprocess.utils.declaration_printer import DeclarationPrinter


@pytest.fixture(scope='session')
def parser():
    return DeclarationParser()


@pytest.fixture
def parse(parser):
    """Parse declaration source into a source file node"""
    def _parse(source, file_name='index.d.ts'):
        return parser.parse(source, file_name=file_name)
    return _parse


@pytest.fixture
def printer():
    return DeclarationPrinter()


@pytest.fixture
def test_logger():
    logger = logging.getLogger('dts_postprocess.tests')
    logger.setLevel(logging.DEBUG)
    return logger
