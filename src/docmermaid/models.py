"""Host-shaped data model handed to the plugin by a documentation build."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class Tag:
    """A named annotation block such as ``@mermaid``; ``text`` is rewritten in place."""

    name: str
    text: str


@dataclass
class Comment:
    tags: Optional[List[Tag]] = None


@dataclass
class Symbol:
    name: str
    comment: Optional[Comment] = None


@dataclass
class Project:
    symbols: Dict[str, Symbol] = field(default_factory=dict)


@dataclass
class Context:
    """Traversal context passed at the start of cross-reference resolution."""

    project: Project


@dataclass
class Page:
    """One rendered document; ``contents`` is rewritten in place before it is written."""

    url: str
    contents: Optional[str] = None


def attach_tag(symbol: Symbol, tag: Tag) -> Tag:
    """Append ``tag`` to the symbol's comment, creating the comment or tag list if missing.

    Tags already present on the comment are kept.
    """
    if symbol.comment is None:
        symbol.comment = Comment()
    if symbol.comment.tags is None:
        symbol.comment.tags = []
    symbol.comment.tags.append(tag)
    return tag
