"""Markdown to safe HTML rendering.

User markup is rendered first and the resulting HTML is then reduced to an
allow-list. Sanitizing the markdown source alone would not be enough: the
renderer passes raw HTML through and can emit structure of its own.
"""
from __future__ import annotations

import threading

import bleach
from bleach.html5lib_shim import Filter
from markdown_it import MarkdownIt
from mdit_py_plugins.anchors import anchors_plugin

ALLOWED_TAGS = frozenset(
    {
        "h1", "h2", "h3", "h4", "h5", "h6",
        "blockquote", "p", "a", "ul", "ol", "li",
        "b", "i", "strong", "em", "s", "strike", "del", "ins", "sup", "sub",
        "code", "pre", "hr", "br", "div", "span",
        "table", "thead", "tbody", "tr", "th", "td", "caption",
        "img",
    }
)

ALLOWED_ATTRIBUTES: dict[str, list[str]] = {
    "a": ["href", "name", "target", "rel", "title"],
    "img": ["src", "srcset", "alt", "title", "width", "height", "loading"],
    "th": ["scope"],
    "*": ["id", "class"],
}

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto", "tel"})

NEW_WINDOW_REL = "noopener noreferrer"


class NewWindowLinkFilter(Filter):
    """Force ``rel="noopener noreferrer"`` on links that open a new window."""

    def __iter__(self):
        for token in super().__iter__():
            if token["type"] == "StartTag" and token["name"] == "a":
                attrs = token["data"]
                if attrs.get((None, "target")):
                    attrs[(None, "rel")] = NEW_WINDOW_REL
            yield token


class ContentSanitizer:
    """Render untrusted markdown into HTML that can be embedded as-is.

    Tags outside the allow-list are removed (their text survives as escaped
    character data), attributes outside it are dropped, and links or image
    sources using any other URL scheme lose the offending attribute.
    """

    def __init__(self) -> None:
        # gfm-like: commonmark plus tables, strikethrough and linkify.
        # Headings of every level get slug ids.
        self._md = MarkdownIt("gfm-like", {"breaks": True}).use(anchors_plugin, max_level=6)
        # bleach cleaners are not thread-safe; keep one per thread.
        self._local = threading.local()

    @property
    def _cleaner(self) -> bleach.Cleaner:
        cleaner = getattr(self._local, "cleaner", None)
        if cleaner is None:
            cleaner = bleach.Cleaner(
                tags=ALLOWED_TAGS,
                attributes=ALLOWED_ATTRIBUTES,
                protocols=ALLOWED_PROTOCOLS,
                strip=True,
                strip_comments=True,
                filters=[NewWindowLinkFilter],
            )
            self._local.cleaner = cleaner
        return cleaner

    def render(self, markdown: str | None) -> str:
        """Return sanitized HTML for ``markdown``; empty or None yields ''."""
        if not markdown:
            return ""
        return self.clean(self._md.render(markdown))

    def clean(self, html: str) -> str:
        """Reduce already-rendered HTML to the allow-list."""
        if not html:
            return ""
        return self._cleaner.clean(html).strip()

