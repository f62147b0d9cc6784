"""Wire the mermaid transforms into a documentation build's lifecycle events."""
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from .models import Context, Page
from .page import DEFAULT_MERMAID_VERSION, convert_page_contents
from .tags import convert_comment_tag_text, mermaid_tags

logger = logging.getLogger(__name__)

PLUGIN_NAME = "mermaid"
OPTION_NAME = "mermaid-version"

# Fired by the converter once the symbol graph exists, before references are resolved.
EVENT_RESOLVE_BEGIN = "resolveBegin"
# Fired by the renderer after a page is rendered, before it is written.
EVENT_PAGE_END = "endPage"


class EventSource(Protocol):
    def on(self, event: str, callback: Callable[[Any], None]) -> Any:
        ...


@dataclass
class MermaidOptions:
    version: str = DEFAULT_MERMAID_VERSION

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> "MermaidOptions":
        version = getattr(namespace, OPTION_NAME.replace("-", "_"), None)
        if version is None:
            return cls()
        return cls(version=version)


def add_options(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Register ``--mermaid-version`` on a host argument parser."""
    parser.add_argument(
        f"--{OPTION_NAME}",
        default=DEFAULT_MERMAID_VERSION,
        metavar="VERSION",
        help=f"mermaid release loaded from unpkg (default: {DEFAULT_MERMAID_VERSION})",
    )
    return parser


class MermaidPlugin:
    """Rewrites ``@mermaid`` tags at resolve begin and injects the runtime at page end."""

    name = PLUGIN_NAME

    def __init__(self, options: Optional[MermaidOptions] = None) -> None:
        self.options = options or MermaidOptions()

    def initialize(self, converter: EventSource, renderer: EventSource) -> "MermaidPlugin":
        converter.on(EVENT_RESOLVE_BEGIN, self.on_resolve_begin)
        renderer.on(EVENT_PAGE_END, self.on_page_end)
        return self

    def on_resolve_begin(self, context: Context) -> None:
        tags = mermaid_tags(context)
        for tag in tags:
            tag.text = convert_comment_tag_text(tag.text)
        logger.debug("converted %d @%s tag(s)", len(tags), PLUGIN_NAME)

    def on_page_end(self, page: Page) -> None:
        if page.contents is None:
            logger.debug("page %s has no contents; skipped", page.url)
            return
        converted = convert_page_contents(page.contents, self.options.version)
        if converted == page.contents:
            logger.debug("page %s has no </body>; left unchanged", page.url)
        else:
            logger.debug("injected mermaid %s into %s", self.options.version, page.url)
        page.contents = converted


def load(
    converter: EventSource,
    renderer: EventSource,
    options: Optional[MermaidOptions] = None,
) -> MermaidPlugin:
    """Host entry point: build the plugin and subscribe it to both emitters."""
    return MermaidPlugin(options).initialize(converter, renderer)
