"""Insert the mermaid runtime bootstrap into rendered HTML pages.

The insertion is textual: the first literal ``</body>`` is replaced by the
loader script, the ``startOnLoad`` initialization and a new ``</body>``. A
``</body>`` that appears inside a script or text node is treated the same
way, and running the conversion twice injects the bootstrap twice.
"""
from __future__ import annotations

import re
from string import Template

from .resources import load_bootstrap_template

DEFAULT_MERMAID_VERSION = "7.1.2"
BODY_CLOSING_TAG = re.compile(r"</body>")


def mermaid_script_url(version: str = DEFAULT_MERMAID_VERSION) -> str:
    return f"https://unpkg.com/mermaid@{version}/dist/mermaid.min.js"


def bootstrap_fragment(version: str = DEFAULT_MERMAID_VERSION) -> str:
    """Return the loader and initialization scripts followed by ``</body>``."""
    return Template(load_bootstrap_template()).safe_substitute(url=mermaid_script_url(version))


def convert_page_contents(contents: str, version: str = DEFAULT_MERMAID_VERSION) -> str:
    if not BODY_CLOSING_TAG.search(contents):
        return contents
    fragment = bootstrap_fragment(version)
    # callable replacement keeps backslashes in the fragment literal
    return BODY_CLOSING_TAG.sub(lambda _match: fragment, contents, count=1)
