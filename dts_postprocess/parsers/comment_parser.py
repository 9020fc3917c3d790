"""
JSDoc comment parsing for declaration tree nodes
"""
import re
from typing import List, Optional

from dts_postprocess.models.comment_block import CommentBlock, ParsedLeadingComments, TagEntry
from dts_postprocess.models.declaration_node import ROOT_KINDS

# Tags whose first word after the type is a name rather than description.
NAMED_TAGS = frozenset({
    'param', 'arg', 'argument', 'property', 'prop', 'template', 'typedef', 'callback'
})

_TAG_PATTERN = re.compile(r'@([A-Za-z_$][\w$\-]*)')
_WHITESPACE = b' \t\r\n\f\v'


class CommentSyntaxError(ValueError):
    """Raised internally for malformed tag syntax"""


def get_leading_comments(node, source) -> List[str]:
    """
    Collect the raw leading comments of a node

    Comments are read from the node's full start up to the first non-comment
    character. Except at the very start of a file, comments that share the
    line of the preceding token are trailing comments and are skipped.

    Args:
        node: DeclarationNode being inspected
        source: Source bytes (or str) the node positions refer to

    Returns:
        List of comment strings in source order
    """
    if node.kind in ROOT_KINDS or node.is_synthesized:
        return []

    if isinstance(source, str):
        source = source.encode('utf-8')

    pos = node.full_start
    limit = min(node.start if node.start >= pos else len(source), len(source))
    collecting = pos == 0
    comments = []

    while pos < limit:
        char = source[pos]

        if char == 0x0A:  # newline
            collecting = True
            pos += 1
        elif char in _WHITESPACE:
            pos += 1
        elif source.startswith(b'/*', pos):
            end = source.find(b'*/', pos + 2)
            if end == -1:
                break
            end += 2
            if collecting:
                comments.append(source[pos:end].decode('utf-8', errors='replace'))
            pos = end
        elif source.startswith(b'//', pos):
            end = source.find(b'\n', pos)
            if end == -1:
                end = len(source)
            if collecting:
                comments.append(source[pos:end].decode('utf-8', errors='replace'))
            pos = end
        else:
            break

    return comments


def parse_comment(comment: str) -> Optional[CommentBlock]:
    """
    Parse a single comment into a structured block

    Args:
        comment: Raw comment text including the delimiters

    Returns:
        CommentBlock, or None when the comment is not a well formed `/** */` block
    """
    if not is_jsdoc_comment(comment):
        return None

    lines = [_strip_decoration(line) for line in comment[3:-2].split('\n')]

    description_lines = []
    sections = []
    for line in lines:
        if _TAG_PATTERN.match(line):
            sections.append([line])
        elif sections:
            sections[-1].append(line)
        else:
            description_lines.append(line)

    try:
        tags = tuple(_parse_tag('\n'.join(section)) for section in sections)
    except CommentSyntaxError:
        return None

    return CommentBlock(description=_join_text(description_lines), tags=tags, source=comment)


def parse_leading_comments(node, source) -> ParsedLeadingComments:
    """
    Parse all leading JSDoc comment blocks of a node

    The last parsed block is the active block for the node.

    Args:
        node: DeclarationNode being inspected
        source: Source bytes (or str) the node positions refer to

    Returns:
        ParsedLeadingComments
    """
    result = ParsedLeadingComments()

    for comment in get_leading_comments(node, source):
        block = parse_comment(comment)
        if block is not None:
            result.comments.append(comment)
            result.parsed.append(block)

    if result.parsed:
        result.last_comment = result.comments[-1]
        result.last_parsed = result.parsed[-1]

    return result


def is_jsdoc_comment(comment):
    return (
        isinstance(comment, str)
        and len(comment) >= 5
        and comment.startswith('/**')
        and not comment.startswith('/***')
        and comment.endswith('*/')
    )


# Internal helpers -----------------------------------------------------------

def _strip_decoration(line):
    """Remove indentation and the leading `*` of a comment line"""
    line = line.strip()
    if line.startswith('*'):
        line = line[1:]
        if line.startswith(' '):
            line = line[1:]
    return line.rstrip()


def _join_text(lines):
    text = '\n'.join(lines).strip('\n')
    return text.strip()


def _parse_tag(section):
    match = _TAG_PATTERN.match(section)
    tag = match.group(1)
    rest = section[match.end():]

    # Type in balanced braces
    type_text = None
    stripped = rest.lstrip()
    if stripped.startswith('{'):
        end = _find_closing(stripped, 0, '{', '}')
        type_text = stripped[1:end].strip()
        rest = stripped[end + 1:]

    name = None
    optional = False
    default = None
    stripped = rest.lstrip()
    if tag in NAMED_TAGS and stripped:
        if stripped.startswith('['):
            end = _find_closing(stripped, 0, '[', ']')
            inner = stripped[1:end].strip()
            name, _, default_text = inner.partition('=')
            name = name.strip()
            default = default_text.strip() if default_text else None
            optional = True
            rest = stripped[end + 1:]
        else:
            parts = stripped.split(None, 1)
            name = parts[0]
            rest = parts[1] if len(parts) > 1 else ''

    description = _join_text(rest.split('\n')) or None

    return TagEntry(
        tag=tag,
        type=type_text,
        name=name or None,
        description=description,
        optional=optional,
        default=default
    )


def _find_closing(text, start, opener, closer):
    depth = 0
    for index in range(start, len(text)):
        if text[index] == opener:
            depth += 1
        elif text[index] == closer:
            depth -= 1
            if depth == 0:
                return index
    raise CommentSyntaxError(f"Unbalanced '{opener}' in tag: {text!r}")
