"""
TypeScript declaration (.d.ts) parser building the declaration tree
"""
import logging
import os

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Parser

from dts_postprocess.models.declaration_node import (
    DeclarationNode,
    HeritageClause,
    NodeKind,
    create_bundle,
    create_source_file,
)

logger = logging.getLogger(__name__)

# Keyword tokens kept as declaration / member modifiers
MODIFIER_TOKENS = frozenset({
    'export', 'default', 'declare', 'abstract', 'static', 'readonly', 'async', 'override',
    'public', 'private', 'protected', 'const'
})

ACCESSOR_TOKENS = frozenset({'get', 'set'})

CLASS_TYPES = frozenset({'class_declaration', 'abstract_class_declaration', 'class'})
NAMESPACE_TYPES = frozenset({'internal_module', 'module'})
METHOD_TYPES = frozenset({'method_signature', 'abstract_method_signature', 'method_definition'})
PROPERTY_TYPES = frozenset({'public_field_definition', 'property_signature'})
PARAMETER_TYPES = frozenset({'required_parameter', 'optional_parameter'})


def _node_text(node, source_code):
    return source_code[node.start_byte:node.end_byte].decode('utf-8')


def _strip_annotation(text):
    """Strip the leading `:` of a type annotation"""
    text = text.strip()
    if text.startswith(':'):
        text = text[1:]
    return text.strip()


def _skip_separators(source_code, pos):
    """Advance past `;` / `,` separators directly following a node"""
    while source_code[pos:pos + 1] in (b';', b','):
        pos += 1
    return pos


def split_top_level(text, separator=','):
    """
    Split on a separator that is not nested in brackets

    Args:
        text: Text to split, e.g. `A<B, C>, D`
        separator: Single character separator

    Returns:
        List of stripped, non-empty parts
    """
    parts = []
    depth = 0
    current = []
    for index, char in enumerate(text):
        if char in '<([{':
            depth += 1
        elif char in '>)]}':
            # `=>` is not a closing bracket
            if not (char == '>' and index > 0 and text[index - 1] == '='):
                depth -= 1
        if char == separator and depth == 0:
            parts.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append(''.join(current).strip())
    return [part for part in parts if part]


class DeclarationParser:
    """Parse TypeScript declaration source into DeclarationNode trees"""

    def __init__(self, tsx=False):
        language_fn = tstypescript.language_tsx if tsx else tstypescript.language_typescript
        self.language = Language(language_fn())
        self.parser = Parser(self.language)

    def parse(self, source, file_name='index.d.ts'):
        """
        Parse declaration source text

        Args:
            source: Source code (str or bytes)
            file_name: Name recorded on the source file node

        Returns:
            SOURCE_FILE DeclarationNode
        """
        if isinstance(source, str):
            source = source.encode('utf-8')
        elif not isinstance(source, (bytes, bytearray)):
            raise TypeError("DeclarationParser.parse error: 'source' is not a string or bytes.")

        source = bytes(source)
        tree = self.parser.parse(source)

        if tree.root_node.has_error:
            logger.debug(f"[DeclarationParser] Syntax errors while parsing '{file_name}'")

        statements = self._extract_statements(tree.root_node, source)
        return create_source_file(statements, source=source, file_name=file_name)

    def parse_file(self, filepath):
        """Parse a declaration file from disk"""
        with open(filepath, 'rb') as f:
            source_code = f.read()

        return self.parse(source_code, file_name=os.path.basename(filepath))

    def parse_bundle(self, sources):
        """
        Parse several declaration sources into one bundle

        Args:
            sources: Mapping of file name -> source text

        Returns:
            BUNDLE DeclarationNode with one SOURCE_FILE child per entry
        """
        return create_bundle(self.parse(source, file_name=name) for name, source in sources.items())

    # Statements --------------------------------------------------------------

    def _extract_statements(self, container, source_code):
        """Extract declaration statements from a program or statement block"""
        statements = []
        prev_end = container.start_byte

        for child in container.children:
            if child.type == 'comment':
                continue

            if child.is_named:
                statements.extend(self._extract_statement(child, source_code, prev_end))

            prev_end = _skip_separators(source_code, child.end_byte)

        return statements

    def _extract_statement(self, node, source_code, full_start):
        """
        Extract one top-level statement

        `export` / `declare` wrappers are flattened into modifiers of the
        wrapped declaration which keeps the wrapper's start position.
        """
        modifiers = []
        outer = node
        inner = node

        while True:
            if inner.type == 'export_statement':
                declaration = inner.child_by_field_name('declaration')
                if declaration is None:
                    break
                modifiers.extend(self._keyword_tokens(inner, stop_at=declaration))
                inner = declaration
            elif inner.type == 'ambient_declaration':
                declaration = next(
                    (child for child in inner.named_children if child.type != 'comment'), None)
                if declaration is None or declaration.type == 'statement_block':
                    break
                modifiers.append('declare')
                inner = declaration
            elif inner.type == 'expression_statement' and inner.named_child_count == 1:
                wrapped = inner.named_children[0]
                if wrapped.type not in NAMESPACE_TYPES:
                    break
                inner = wrapped
            else:
                break

        common = {
            'start': outer.start_byte,
            'end': outer.end_byte,
            'full_start': full_start,
            'modifiers': tuple(modifiers)
        }

        if inner.type in CLASS_TYPES:
            return [self._extract_class(inner, source_code, common)]
        if inner.type == 'interface_declaration':
            return [self._extract_interface(inner, source_code, common)]
        if inner.type in ('function_signature', 'function_declaration'):
            return [self._extract_function(inner, source_code, common)]
        if inner.type in ('lexical_declaration', 'variable_declaration'):
            return self._extract_variables(inner, source_code, common)
        if inner.type == 'type_alias_declaration':
            return [self._extract_type_alias(inner, source_code, common)]
        if inner.type in NAMESPACE_TYPES:
            return [self._extract_namespace(inner, source_code, common)]
        if outer.type == 'import_statement':
            return [DeclarationNode(kind=NodeKind.IMPORT, text=_node_text(outer, source_code), **common)]

        name_node = inner.child_by_field_name('name')
        return [DeclarationNode(
            kind=NodeKind.STATEMENT,
            name=_node_text(name_node, source_code) if name_node else None,
            text=_node_text(outer, source_code),
            start=outer.start_byte,
            end=outer.end_byte,
            full_start=full_start
        )]

    def _extract_class(self, node, source_code, common):
        modifiers = list(common.pop('modifiers'))
        if node.type == 'abstract_class_declaration':
            modifiers.append('abstract')

        heritage = []
        for child in node.named_children:
            if child.type == 'class_heritage':
                for clause in child.named_children:
                    if clause.type == 'extends_clause':
                        heritage.append(self._heritage_clause('extends', clause, source_code))
                    elif clause.type == 'implements_clause':
                        heritage.append(self._heritage_clause('implements', clause, source_code))

        body = node.child_by_field_name('body')

        return DeclarationNode(
            kind=NodeKind.CLASS,
            name=self._field_text(node, 'name', source_code),
            children=self._extract_members(body, source_code) if body else [],
            modifiers=tuple(modifiers),
            type_parameters=self._field_text(node, 'type_parameters', source_code),
            heritage=tuple(clause for clause in heritage if clause.types),
            **common
        )

    def _extract_interface(self, node, source_code, common):
        heritage = []
        for child in node.named_children:
            if child.type == 'extends_type_clause':
                heritage.append(self._heritage_clause('extends', child, source_code))

        body = node.child_by_field_name('body')

        return DeclarationNode(
            kind=NodeKind.INTERFACE,
            name=self._field_text(node, 'name', source_code),
            children=self._extract_members(body, source_code) if body else [],
            type_parameters=self._field_text(node, 'type_parameters', source_code),
            heritage=tuple(clause for clause in heritage if clause.types),
            **common
        )

    def _extract_function(self, node, source_code, common):
        modifiers = list(common.pop('modifiers'))
        modifiers.extend(token for token in self._keyword_tokens(node) if token == 'async')

        return DeclarationNode(
            kind=NodeKind.FUNCTION,
            name=self._field_text(node, 'name', source_code),
            children=self._extract_parameters(node, source_code),
            modifiers=tuple(modifiers),
            type_text=self._annotation_text(node, 'return_type', source_code),
            type_parameters=self._field_text(node, 'type_parameters', source_code),
            **common
        )

    def _extract_variables(self, node, source_code, common):
        keyword = 'var'
        kind_node = node.child_by_field_name('kind')
        if kind_node is not None:
            keyword = _node_text(kind_node, source_code)

        declarators = [child for child in node.named_children if child.type == 'variable_declarator']
        variables = []

        for index, declarator in enumerate(declarators):
            value = declarator.child_by_field_name('value')
            position = dict(common)
            if index > 0:
                # Only the first declarator owns the statement's leading comments
                position.update(start=declarator.start_byte, full_start=declarator.start_byte)
            position['end'] = declarator.end_byte if index < len(declarators) - 1 else common['end']

            variables.append(DeclarationNode(
                kind=NodeKind.VARIABLE,
                name=self._field_text(declarator, 'name', source_code),
                type_text=self._annotation_text(declarator, 'type', source_code),
                keyword=keyword,
                text=_node_text(value, source_code) if value else None,
                **position
            ))

        return variables

    def _extract_type_alias(self, node, source_code, common):
        return DeclarationNode(
            kind=NodeKind.TYPE_ALIAS,
            name=self._field_text(node, 'name', source_code),
            type_text=self._field_text(node, 'value', source_code),
            type_parameters=self._field_text(node, 'type_parameters', source_code),
            **common
        )

    def _extract_namespace(self, node, source_code, common):
        keyword = 'module' if node.type == 'module' else 'namespace'
        body = node.child_by_field_name('body')

        return DeclarationNode(
            kind=NodeKind.NAMESPACE,
            name=self._field_text(node, 'name', source_code),
            children=self._extract_statements(body, source_code) if body else [],
            keyword=keyword,
            **common
        )

    # Members -----------------------------------------------------------------

    def _extract_members(self, body, source_code):
        """Extract class / interface members from a body node"""
        members = []
        prev_end = body.start_byte

        for child in body.children:
            if child.type == 'comment':
                continue

            if child.is_named:
                member = self._extract_member(child, source_code, prev_end)
                if member is not None:
                    members.append(member)

            prev_end = _skip_separators(source_code, child.end_byte)

        return members

    def _extract_member(self, node, source_code, full_start):
        common = {'start': node.start_byte, 'end': node.end_byte, 'full_start': full_start}

        if node.type in METHOD_TYPES:
            tokens = self._keyword_tokens(node)
            name = self._field_text(node, 'name', source_code)
            is_constructor = name == 'constructor'

            return DeclarationNode(
                kind=NodeKind.CONSTRUCTOR if is_constructor else NodeKind.METHOD,
                name=name,
                children=self._extract_parameters(node, source_code),
                modifiers=self._member_modifiers(node, tokens, source_code),
                type_text=self._annotation_text(node, 'return_type', source_code),
                type_parameters=self._field_text(node, 'type_parameters', source_code),
                optional='?' in tokens,
                keyword=next((token for token in tokens if token in ACCESSOR_TOKENS), None),
                **common
            )

        if node.type in PROPERTY_TYPES:
            tokens = self._keyword_tokens(node)
            value = node.child_by_field_name('value')

            return DeclarationNode(
                kind=NodeKind.PROPERTY,
                name=self._field_text(node, 'name', source_code),
                modifiers=self._member_modifiers(node, tokens, source_code),
                type_text=self._annotation_text(node, 'type', source_code),
                optional='?' in tokens,
                text=_node_text(value, source_code) if value else None,
                **common
            )

        if node.type == 'decorator':
            return None

        return DeclarationNode(kind=NodeKind.STATEMENT, text=_node_text(node, source_code), **common)

    def _member_modifiers(self, node, tokens, source_code):
        modifiers = []
        for child in node.children:
            if child.type in ('accessibility_modifier', 'override_modifier'):
                modifiers.append(_node_text(child, source_code))
        modifiers.extend(token for token in tokens if token in MODIFIER_TOKENS)
        return tuple(modifiers)

    # Parameters --------------------------------------------------------------

    def _extract_parameters(self, node, source_code):
        params_node = node.child_by_field_name('parameters')
        if params_node is None:
            return []

        parameters = []
        prev_end = params_node.start_byte

        for child in params_node.children:
            if child.type == 'comment':
                continue

            if child.type in PARAMETER_TYPES:
                parameters.append(self._extract_parameter(child, source_code, prev_end))

            prev_end = child.end_byte

        return parameters

    def _extract_parameter(self, node, source_code, full_start):
        pattern = node.child_by_field_name('pattern')
        name = _node_text(pattern, source_code) if pattern else _node_text(node, source_code)
        rest = False

        if pattern is not None and pattern.type == 'rest_pattern':
            rest = True
            name = name[3:].strip()

        modifiers = []
        for child in node.children:
            if child.type in ('accessibility_modifier', 'override_modifier'):
                modifiers.append(_node_text(child, source_code))
            elif not child.is_named and child.type == 'readonly':
                modifiers.append('readonly')

        return DeclarationNode(
            kind=NodeKind.PARAMETER,
            name=name,
            start=node.start_byte,
            end=node.end_byte,
            full_start=full_start,
            modifiers=tuple(modifiers),
            type_text=self._annotation_text(node, 'type', source_code),
            optional=node.type == 'optional_parameter',
            rest=rest
        )

    # Helpers -----------------------------------------------------------------

    def _field_text(self, node, field_name, source_code):
        child = node.child_by_field_name(field_name)
        return _node_text(child, source_code) if child is not None else None

    def _annotation_text(self, node, field_name, source_code):
        child = node.child_by_field_name(field_name)
        if child is None:
            return None
        return _strip_annotation(_node_text(child, source_code))

    def _keyword_tokens(self, node, stop_at=None):
        """Anonymous keyword tokens of a node, up to an optional child"""
        tokens = []
        for child in node.children:
            if stop_at is not None and child.start_byte >= stop_at.start_byte:
                break
            if not child.is_named:
                tokens.append(child.type)
        return tokens

    def _heritage_clause(self, token, clause, source_code):
        text = _node_text(clause, source_code).strip()
        if text.startswith(token):
            text = text[len(token):]
        return HeritageClause(token=token, types=tuple(split_top_level(text)))
