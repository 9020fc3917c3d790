"""
Support `import('module').Ident` types in the `@implements` JSDoc tag of classes

Each matching class gets an `implements` heritage clause naming the imported
identifiers, and `import type { ... } from 'module';` statements are added at
the top of the source file declaring the class.
"""
import logging
from typing import Dict, Set

from dts_postprocess.models.declaration_node import DeclarationNode, HeritageClause, NodeKind
from dts_postprocess.parsers.import_type import parse_import_bindings, parse_import_types_from_block
from .base_transformer import KEEP, Replace, make_transformer

logger = logging.getLogger(__name__)


class ImportAccumulator:
    """Identifiers to import grouped by source file, then module path"""

    def __init__(self):
        self.imports: Dict[str, Dict[str, Set[str]]] = {}

    def __bool__(self):
        return bool(self.imports)

    def add(self, file_name, module, ident):
        self.imports.setdefault(file_name, {}).setdefault(module, set()).add(ident)

    def items(self, file_name):
        """Modules and their identifiers for a source file, both sorted"""
        modules = self.imports.get(file_name, {})
        for module in sorted(modules):
            yield module, sorted(modules[module])


def create_import_type_node(module, idents):
    """Create a synthesized `import type` statement node"""
    return DeclarationNode(
        kind=NodeKind.IMPORT,
        name=module,
        text=f"import type {{ {', '.join(idents)} }} from '{module}';",
        synthetic=True
    )


def _handle_class(ctx):
    implements = set()

    for result in parse_import_types_from_block(ctx.last_parsed, 'implements'):
        ctx.state.add(ctx.source_file.file_name, result.module, result.ident_import)
        implements.add(result.ident_full)

    if not implements:
        return KEEP

    # Existing `extends` stays in place; any `implements` clause is replaced
    heritage = tuple(clause for clause in ctx.node.heritage if clause.token != 'implements')
    heritage += (HeritageClause('implements', tuple(sorted(implements))),)

    return Replace(ctx.node.copy_with(heritage=heritage))


def _bound_names(statements):
    """Names already imported per module by the given statements"""
    bound = {}
    for statement in statements:
        if statement.kind != NodeKind.IMPORT:
            continue
        parsed = parse_import_bindings(statement.text)
        if parsed:
            module, names = parsed
            bound.setdefault(module, set()).update(names)
    return bound


def _add_file_imports(source_file, state):
    if source_file.file_name not in state.imports:
        return source_file

    # Drop imports synthesized by an earlier run before adding the new ones
    statements = [
        child for child in source_file.children if not (child.kind == NodeKind.IMPORT and child.synthetic)
    ]
    bound = _bound_names(statements)

    imports = []
    for module, idents in state.items(source_file.file_name):
        missing = [ident for ident in idents if ident not in bound.get(module, ())]
        if not missing:
            logger.debug(f"[synthesize_implements_imports] Imports from '{module}' already present.")
            continue
        imports.append(create_import_type_node(module, missing))

    return source_file.with_children(imports + statements)


def _add_imports(tree, state):
    if not state:
        return None

    if tree.kind == NodeKind.BUNDLE:
        return tree.with_children(
            _add_file_imports(child, state) if child.kind == NodeKind.SOURCE_FILE else child
            for child in tree.children
        )

    return _add_file_imports(tree, state)


def synthesize_implements_imports():
    """
    Create the `@implements` import type transformer

    Returns:
        TreeTransformer
    """
    return make_transformer(
        _handle_class,
        post_handler=_add_imports,
        node_test=lambda ctx: ctx.node.kind == NodeKind.CLASS,
        state_factory=ImportAccumulator
    )
