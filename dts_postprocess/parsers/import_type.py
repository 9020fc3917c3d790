"""
Parse inline `import('module').Identifier` type references
"""
import posixpath
import re
from dataclasses import dataclass
from typing import List, Optional

# Lenient: the import type may be wrapped in `()`.
# Group 1: module path, group 2: imported identifier, group 3: optional namespaced remainder.
IMPORT_TYPE_PATTERN = re.compile(r"""import\(['"]([^'"]+)['"]\)\.([^.\s]+?)(?:\.([^)\s]+?))?(?=\)?$)""")

# Named import statement: `import [type] [Default,] { A, B as C } from 'module'`.
# Group 1: binding list, group 2: module path.
NAMED_IMPORT_PATTERN = re.compile(
    r"""^import\s+(?:type\s+)?(?:[\w$]+\s*,\s*)?\{([^}]*)\}\s*from\s*['"]([^'"]+)['"]""")

MAX_EXTENSION_LENGTH = 7


@dataclass(frozen=True)
class ImportType:
    """A parsed import type reference"""
    module: str
    ident_import: str  # top level imported symbol
    ident_full: str  # fully qualified symbol, e.g. `Ident.Qualifier`


def trim_module_extension(module):
    """Remove `.d.ts` and any other short file extension from a module path"""
    if module.endswith('.d.ts'):
        module = module[:-len('.d.ts')]

    root, ext = posixpath.splitext(module)
    if ext and len(ext) <= MAX_EXTENSION_LENGTH:
        return root
    return module


def parse_import_type(type_text) -> Optional[ImportType]:
    """
    Parse a tag type string for an import type

    Args:
        type_text: Type string from a JSDoc tag

    Returns:
        ImportType or None when the string is not an import type
    """
    if not isinstance(type_text, str):
        return None

    match = IMPORT_TYPE_PATTERN.search(type_text.strip())
    if not match:
        return None

    ident_import = match.group(2)
    extended = match.group(3)

    return ImportType(
        module=trim_module_extension(match.group(1)),
        ident_import=ident_import,
        ident_full=f"{ident_import}.{extended}" if extended else ident_import
    )


def parse_import_types_from_block(block, tag='implements') -> List[ImportType]:
    """
    Collect the import types of all matching tags in a comment block

    Args:
        block: CommentBlock to scan
        tag: Tag name whose type strings are parsed

    Returns:
        List of ImportType in tag order
    """
    results = []
    if block is None:
        return results

    for entry in block.iter_tags(tag):
        parsed = parse_import_type(entry.type)
        if parsed:
            results.append(parsed)

    return results


def parse_import_bindings(text):
    """
    Local names bound by a named import statement

    Args:
        text: Import statement text

    Returns:
        (module, set of local names) with the module extension trimmed, or None
        when the statement has no named import list
    """
    match = NAMED_IMPORT_PATTERN.search((text or '').strip())
    if not match:
        return None

    names = set()
    for binding in match.group(1).split(','):
        parts = binding.split()
        if parts and parts[0] == 'type':
            parts = parts[1:]
        if parts:
            names.add(parts[-1])

    return trim_module_extension(match.group(2)), names
