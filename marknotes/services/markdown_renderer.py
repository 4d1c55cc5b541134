"""
MarkNotes Backend - Markdown Renderer
=====================================

What:  Converts stored markdown into HTML that is safe to serve to a browser.
How:   Python-Markdown renders the common subset (headings, emphasis, lists,
       fenced code, tables, links); nh3 then strips everything outside an
       allow-list of tags, attributes and URL schemes.
Who:   NoteService.render_note_html() for GET /notes/{id}/html.

Output is a pure function of the input: no per-call state, no randomness, so
rendering the same content twice yields byte-identical HTML.
"""

import markdown
import nh3

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]

ALLOWED_TAGS = {
    "a", "abbr", "b", "blockquote", "br", "code", "del", "em", "h1", "h2", "h3",
    "h4", "h5", "h6", "hr", "i", "img", "li", "ol", "p", "pre", "strong", "sub",
    "sup", "table", "tbody", "td", "th", "thead", "tr", "ul",
}

# "rel" must not be listed here: nh3 sets it itself through link_rel
ALLOWED_ATTRIBUTES = {
    "a": {"href", "title"},
    "abbr": {"title"},
    "code": {"class"},
    "img": {"src", "alt", "title"},
    "td": {"align"},
    "th": {"align"},
}

ALLOWED_URL_SCHEMES = {"http", "https", "mailto"}


class MarkdownRenderer:
    """Markdown → sanitized HTML."""

    def __init__(self, extensions=None):
        self.extensions = list(extensions or MARKDOWN_EXTENSIONS)

    def to_html(self, content: str) -> str:
        """Unsanitized Python-Markdown output."""
        # markdown.Markdown instances keep state between calls; a fresh
        # conversion per call keeps the output independent of call history
        return markdown.markdown(content or "", extensions=self.extensions)

    def sanitize(self, html: str) -> str:
        return nh3.clean(
            html,
            tags=ALLOWED_TAGS,
            attributes=ALLOWED_ATTRIBUTES,
            url_schemes=ALLOWED_URL_SCHEMES,
            link_rel="noopener noreferrer",
        )

    def render(self, content: str) -> str:
        """Render markdown and sanitize the result."""
        return self.sanitize(self.to_html(content))


markdown_renderer = MarkdownRenderer()
