"""
Declaration tree node model representing the entities of a .d.ts file
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple


class NodeKind(str, Enum):
    """Closed set of declaration node kinds"""
    BUNDLE = 'bundle'
    SOURCE_FILE = 'source_file'
    CLASS = 'class'
    INTERFACE = 'interface'
    FUNCTION = 'function'
    VARIABLE = 'variable'
    TYPE_ALIAS = 'type_alias'
    NAMESPACE = 'namespace'
    METHOD = 'method'
    PROPERTY = 'property'
    CONSTRUCTOR = 'constructor'
    PARAMETER = 'parameter'
    IMPORT = 'import'
    STATEMENT = 'statement'  # opaque, printed verbatim


ROOT_KINDS = frozenset({NodeKind.BUNDLE, NodeKind.SOURCE_FILE})
MEMBER_KINDS = frozenset({NodeKind.METHOD, NodeKind.PROPERTY, NodeKind.CONSTRUCTOR})


@dataclass(frozen=True)
class HeritageClause:
    """An `extends` or `implements` clause of a class / interface"""
    token: str  # 'extends', 'implements'
    types: Tuple[str, ...]


@dataclass(eq=False)
class DeclarationNode:
    """
    A node of the declaration tree.

    Positions are byte offsets into the source of the owning source file.
    Synthesized nodes have negative positions and carry no comments.
    """
    kind: NodeKind
    name: Optional[str] = None
    children: List['DeclarationNode'] = field(default_factory=list)
    start: int = -1
    end: int = -1
    full_start: int = -1
    modifiers: Tuple[str, ...] = ()
    type_text: Optional[str] = None  # parameter / property / return / alias type
    type_parameters: Optional[str] = None  # raw `<T extends X>`
    heritage: Tuple[HeritageClause, ...] = ()
    optional: bool = False
    rest: bool = False
    keyword: Optional[str] = None  # 'const', 'let', 'var', 'get', 'set'
    text: Optional[str] = None  # verbatim text of opaque nodes, initializer of variables
    synthetic: bool = False

    # Only set on SOURCE_FILE nodes
    file_name: Optional[str] = None
    source: bytes = b''

    def __repr__(self):
        label = f" {self.name}" if self.name else ''
        return f"<{self.kind.value}{label}:{self.start}>"

    @property
    def is_synthesized(self):
        return self.full_start < 0 or self.start < 0

    def copy_with(self, **changes):
        """Return a shallow copy of this node with the given fields replaced"""
        return replace(self, **changes)

    def with_children(self, children):
        """Return this node, or a copy of it when `children` differs"""
        children = list(children)
        if len(children) == len(self.children) and all(
                new is old for new, old in zip(children, self.children)):
            return self
        return replace(self, children=children)

    # Heritage helpers --------------------------------------------------------

    def heritage_types(self, token):
        """All heritage type texts declared for the given clause token"""
        types = []
        for clause in self.heritage:
            if clause.token == token:
                types.extend(clause.types)
        return types

    def base_class_name(self):
        """
        Name of the class this class extends

        Returns:
            The base name without type arguments, or None
        """
        if self.kind != NodeKind.CLASS:
            return None

        extends = self.heritage_types('extends')
        if not extends:
            return None

        return heritage_name(extends[0])

    # Member helpers ----------------------------------------------------------

    @property
    def members(self):
        return [child for child in self.children if child.kind in MEMBER_KINDS]

    @property
    def methods(self):
        return [child for child in self.children if child.kind == NodeKind.METHOD]

    @property
    def parameters(self):
        return [child for child in self.children if child.kind == NodeKind.PARAMETER]

    def get_method(self, name):
        """First method declaration with the given name"""
        for child in self.children:
            if child.kind == NodeKind.METHOD and child.name == name:
                return child
        return None

    def get_constructor(self):
        """First constructor declaration"""
        for child in self.children:
            if child.kind == NodeKind.CONSTRUCTOR:
                return child
        return None


def heritage_name(type_text):
    """
    Reduce a heritage type expression to the declared name it refers to

    Args:
        type_text: Heritage type text, e.g. `Base<string>`

    Returns:
        The referenced name (`Base`), or None when it cannot be determined
    """
    if not type_text:
        return None

    name = type_text.split('<', 1)[0].strip()
    if not name or any(ch in name for ch in '(){}[]|&,:=\'"'):
        return None

    return ''.join(name.split())


def create_source_file(statements, source=b'', file_name='index.d.ts'):
    """Create a SOURCE_FILE root node"""
    return DeclarationNode(
        kind=NodeKind.SOURCE_FILE,
        name=file_name,
        children=list(statements),
        start=0,
        end=len(source),
        full_start=0,
        file_name=file_name,
        source=source
    )


def create_bundle(source_files):
    """Create a BUNDLE root node from source file nodes"""
    return DeclarationNode(kind=NodeKind.BUNDLE, children=list(source_files), start=0, end=0, full_start=0)


def iter_source_files(tree):
    """Yield the source file nodes of a source file or bundle"""
    if tree.kind == NodeKind.SOURCE_FILE:
        yield tree
    elif tree.kind == NodeKind.BUNDLE:
        for child in tree.children:
            if child.kind == NodeKind.SOURCE_FILE:
                yield child
