"""Public API for docmermaid."""
from .models import Comment, Context, Page, Project, Symbol, Tag, attach_tag
from .page import DEFAULT_MERMAID_VERSION, bootstrap_fragment, convert_page_contents
from .plugin import EVENT_PAGE_END, EVENT_RESOLVE_BEGIN, MermaidOptions, MermaidPlugin, add_options, load
from .tags import MERMAID_TAG_NAME, convert_comment_tag_text, mermaid_tags

__all__ = [
    "Comment",
    "Context",
    "Page",
    "Project",
    "Symbol",
    "Tag",
    "attach_tag",
    "DEFAULT_MERMAID_VERSION",
    "bootstrap_fragment",
    "convert_page_contents",
    "EVENT_PAGE_END",
    "EVENT_RESOLVE_BEGIN",
    "MermaidOptions",
    "MermaidPlugin",
    "add_options",
    "load",
    "MERMAID_TAG_NAME",
    "convert_comment_tag_text",
    "mermaid_tags",
]
