"""
Render declaration trees back to .d.ts source text
"""
from dts_postprocess.models.declaration_node import NodeKind
from dts_postprocess.parsers.comment_parser import get_leading_comments


def reindent_comment(comment, indent):
    """
    Re-indent the continuation lines of a block comment

    Args:
        comment: Raw comment text
        indent: Indentation of the line the comment starts on

    Returns:
        The comment with every line after the first aligned to `indent`
    """
    lines = comment.split('\n')
    if len(lines) == 1:
        return comment

    result = [lines[0]]
    for line in lines[1:]:
        stripped = line.strip()
        result.append(f"{indent} {stripped}" if stripped.startswith('*') else f"{indent}{stripped}")
    return '\n'.join(result)


class DeclarationPrinter:
    """Print DeclarationNode trees as declaration source"""

    def __init__(self, indent='  ', comments=True):
        self.indent = indent
        self.comments = comments

    def print(self, tree):
        """
        Print a source file, bundle or single declaration node

        Args:
            tree: DeclarationNode to print

        Returns:
            Declaration source text
        """
        if tree.kind == NodeKind.BUNDLE:
            return '\n'.join(self.print(child) for child in tree.children)

        if tree.kind == NodeKind.SOURCE_FILE:
            lines = []
            for statement in tree.children:
                lines.extend(self._print_node(statement, tree.source, 0))
            return '\n'.join(lines) + '\n' if lines else ''

        # Without the owning source file there are no comments to print
        return '\n'.join(self._print_node(tree, None, 0))

    def _print_node(self, node, source, depth):
        prefix = self.indent * depth
        lines = []

        if self.comments and source is not None:
            for comment in get_leading_comments(node, source):
                lines.append(prefix + reindent_comment(comment, prefix))

        kind = node.kind

        if kind in (NodeKind.CLASS, NodeKind.INTERFACE):
            lines.append(prefix + self._heading(node) + ' {')
            for member in node.children:
                lines.extend(self._print_node(member, source, depth + 1))
            lines.append(prefix + '}')
        elif kind == NodeKind.NAMESPACE:
            head = self._join(node.modifiers, node.keyword or 'namespace', node.name)
            lines.append(prefix + head + ' {')
            for statement in node.children:
                lines.extend(self._print_node(statement, source, depth + 1))
            lines.append(prefix + '}')
        else:
            lines.append(prefix + self.format_node(node, member=depth > 0))

        return lines

    def _heading(self, node):
        keyword = 'class' if node.kind == NodeKind.CLASS else 'interface'
        name = (node.name or '') + (node.type_parameters or '')
        head = self._join(node.modifiers, keyword, name)

        for clause in node.heritage:
            if clause.types:
                head += f" {clause.token} {', '.join(clause.types)}"

        return head

    def format_node(self, node, member=False):
        """
        Format a node without nested bodies or comments as a single statement

        Args:
            node: DeclarationNode of a non container kind
            member: Whether the node is printed inside a class / namespace body

        Returns:
            Formatted text without indentation
        """
        kind = node.kind

        if kind == NodeKind.FUNCTION:
            signature = self._signature(node)
            return self._join(node.modifiers, 'function', f"{node.name}{signature}") + ';'

        if kind == NodeKind.VARIABLE:
            text = self._join(node.modifiers, node.keyword or 'const', node.name)
            if node.type_text:
                text += f": {node.type_text}"
            if node.text:
                text += f" = {node.text}"
            return text + ';'

        if kind == NodeKind.TYPE_ALIAS:
            name = (node.name or '') + (node.type_parameters or '')
            return self._join(node.modifiers, 'type', name) + f" = {node.type_text};"

        if kind in (NodeKind.METHOD, NodeKind.CONSTRUCTOR):
            name = 'constructor' if kind == NodeKind.CONSTRUCTOR else node.name
            if node.optional:
                name += '?'
            return self._join(node.modifiers, node.keyword, f"{name}{self._signature(node)}") + ';'

        if kind == NodeKind.PROPERTY:
            text = self._join(node.modifiers, node.name + ('?' if node.optional else ''))
            if node.type_text:
                text += f": {node.type_text}"
            if node.text:
                text += f" = {node.text}"
            return text + ';'

        if kind == NodeKind.PARAMETER:
            return self.format_parameter(node)

        if kind in (NodeKind.CLASS, NodeKind.INTERFACE):
            return self._heading(node) + ' {}'

        # Imports and opaque statements are printed verbatim
        text = (node.text or '').strip()
        if member and text and not text.endswith((';', '}', ',')):
            text += ';'
        return text

    def format_parameter(self, param):
        text = self._join(param.modifiers, ('...' if param.rest else '') + (param.name or ''))
        if param.optional:
            text += '?'
        if param.type_text:
            text += f": {param.type_text}"
        return text

    def _signature(self, node):
        params = ', '.join(self.format_parameter(param) for param in node.parameters)
        signature = f"{node.type_parameters or ''}({params})"
        if node.type_text:
            signature += f": {node.type_text}"
        return signature

    @staticmethod
    def _join(modifiers, *parts):
        return ' '.join([*modifiers, *(part for part in parts if part)])
