"""Collect ``@mermaid`` comment tags and turn their text into diagram markup."""
from __future__ import annotations

from itertools import chain
from typing import List, Optional

from .models import Comment, Context, Tag

MERMAID_TAG_NAME = "mermaid"


def has_comment(comment: Optional[Comment]) -> bool:
    return comment is not None


def has_tags(tags: Optional[List[Tag]]) -> bool:
    return tags is not None


def is_mermaid_tag(tag: Tag) -> bool:
    return tag.name == MERMAID_TAG_NAME


def mermaid_tags(context: Context) -> List[Tag]:
    """Return every ``@mermaid`` tag in the project, in symbol order then tag order.

    Symbols without a comment and comments without tags contribute nothing.
    """
    comments = filter(has_comment, (symbol.comment for symbol in context.project.symbols.values()))
    tag_lists = filter(has_tags, (comment.tags for comment in comments))
    return [tag for tag in chain.from_iterable(tag_lists) if is_mermaid_tag(tag)]


def convert_comment_tag_text(tag_text: str) -> str:
    """Wrap the first line in an h4 heading and the remaining lines in a mermaid div.

    >>> convert_comment_tag_text("Flow\\nA-->B")
    '#### Flow \\n\\n <div class="mermaid">A-->B</div>'
    """
    title, _, body = tag_text.partition("\n")
    return f'#### {title} \n\n <div class="mermaid">{body}</div>'
