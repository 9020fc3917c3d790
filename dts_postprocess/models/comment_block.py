"""
Structured JSDoc comment block model
"""
from dataclasses import dataclass, field, replace
from typing import List, Optional


@dataclass(frozen=True)
class TagEntry:
    """A single `@tag {type} name description` entry"""
    tag: str
    type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    optional: bool = False
    default: Optional[str] = None

    def to_line(self):
        """Render the entry as the text following the leading `* `"""
        parts = [f"@{self.tag}"]
        if self.type is not None:
            parts.append(f"{{{self.type}}}")
        if self.name:
            if self.optional:
                name = f"{self.name}={self.default}" if self.default is not None else self.name
                parts.append(f"[{name}]")
            else:
                parts.append(self.name)
        if self.description:
            parts.append(self.description)
        return ' '.join(parts)


def _tag_set(names):
    if names is None:
        return None
    if isinstance(names, str):
        return {names}
    return set(names)


@dataclass(frozen=True)
class CommentBlock:
    """Parsed form of one `/** ... */` comment"""
    description: str = ''
    tags: tuple = ()
    source: str = ''

    def iter_tags(self, names=None):
        """
        Iterate over all tags or only those with the given names

        Args:
            names: A tag name, an iterable of tag names, or None for all tags
        """
        wanted = _tag_set(names)
        for entry in self.tags:
            if wanted is None or entry.tag in wanted:
                yield entry

    def has_tag(self, names):
        return any(True for _ in self.iter_tags(names))

    def without_tags(self, names=None):
        """Return a copy of this block with the named tags (or all tags) removed"""
        wanted = _tag_set(names)
        kept = tuple(entry for entry in self.tags if wanted is not None and entry.tag not in wanted)
        return replace(self, tags=kept)

    def to_comment(self, indent=''):
        """
        Render the block back to a JSDoc comment string

        Args:
            indent: Indentation prepended to every line after the first

        Returns:
            The comment text starting with `/**`
        """
        lines = []
        if self.description:
            lines.extend(self.description.split('\n'))
        if lines and self.tags:
            lines.append('')
        for entry in self.tags:
            lines.extend(entry.to_line().split('\n'))

        if not lines:
            return '/** */'

        if len(lines) == 1 and not self.tags:
            return f"/** {lines[0]} */"

        body = '\n'.join(f"{indent} * {line}".rstrip() for line in lines)
        return f"/**\n{body}\n{indent} */"


@dataclass
class ParsedLeadingComments:
    """All leading comments of a node and their parsed blocks"""
    comments: List[str] = field(default_factory=list)
    parsed: List[CommentBlock] = field(default_factory=list)
    last_comment: Optional[str] = None
    last_parsed: Optional[CommentBlock] = None
