"""
Command line interface

Usage:
    dts-postprocess index.d.ts
    dts-postprocess index.d.ts -o out.d.ts --filter-tag internal --filter-tag hidden
    dts-postprocess index.d.ts --graph-output graph.json --log-level DEBUG
"""
import argparse
import functools
import logging
import sys

from dts_postprocess.config import PostProcessConfig
from dts_postprocess.postprocess import PostProcess, output_graph, process_inherit_doc
from dts_postprocess.transformers import (
    filter_by_tags,
    remove_private_static,
    setter_param_name,
    synthesize_implements_imports,
)
from dts_postprocess.utils.logger import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_CONFIG_ERROR = 2


def build_parser():
    parser = argparse.ArgumentParser(
        prog='dts-postprocess',
        description='Post process a bundled TypeScript declaration file'
    )
    parser.add_argument('input', help='Declaration file (.d.ts) to process')
    parser.add_argument('-o', '--output', help='Alternate output file (default: overwrite input)')
    parser.add_argument('--filter-tag', action='append', dest='filter_tags', metavar='TAG',
                        help='Remove declarations tagged with TAG (repeatable, default: internal)')
    parser.add_argument('--no-implements', action='store_true',
                        help='Do not synthesize imports for @implements import types')
    parser.add_argument('--no-inherit-doc', action='store_true',
                        help='Do not propagate parameter types to @inheritDoc members')
    parser.add_argument('--graph-output', metavar='PATH', help='Write the dependency graph JSON to PATH')
    parser.add_argument('--log-level', help='Log level (DEBUG, INFO, WARNING, ERROR)')
    parser.add_argument('--env-file', help='Explicit .env file to load')
    return parser


def build_transformers(config, implements=True):
    transformers = [remove_private_static(), setter_param_name()]
    if config.filter_tags:
        transformers.append(filter_by_tags(config.filter_tags))
    if implements:
        transformers.append(synthesize_implements_imports())
    return transformers


def build_processors(config, inherit_doc=True):
    processors = []
    if inherit_doc:
        processors.append(functools.partial(process_inherit_doc, tags=config.inherit_tags))
    if config.graph_output:
        processors.append(output_graph(config.graph_output, config.graph_indent))
    return processors


def main(argv=None):
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = PostProcessConfig.from_env(args.env_file).with_overrides(
            log_level=args.log_level.upper() if args.log_level else None,
            filter_tags=tuple(args.filter_tags) if args.filter_tags else None,
            graph_output=args.graph_output
        )
        configure_logging(config.log_level)

        processors = build_processors(config, inherit_doc=not args.no_inherit_doc)

        result = PostProcess.process_file(
            args.input,
            processors,
            transformers=build_transformers(config, implements=not args.no_implements),
            dependencies=config.dependencies and bool(processors),
            log_start=True,
            output=args.output
        )
    except (TypeError, ValueError) as e:
        print(f"dts-postprocess: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if not result.completed:
        logger.error('Post processing aborted.')
        return EXIT_ABORTED

    logger.info(f"Post processed '{args.input}' -> '{args.output or args.input}'")
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
