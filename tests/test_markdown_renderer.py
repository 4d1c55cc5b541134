"""
MarkNotes Backend - Markdown Renderer Tests
===========================================

What:  Markdown → HTML conversion and the allow-list sanitizer.
"""

import pytest

from marknotes.services.markdown_renderer import MarkdownRenderer


@pytest.fixture
def renderer():
    return MarkdownRenderer()


class TestRendering:

    def test_common_markdown(self, renderer):
        html = renderer.render("# Title\n\nSome **bold** and *italic* text.\n\n- one\n- two\n")

        assert "<h1>Title</h1>" in html
        assert "<strong>bold</strong>" in html
        assert "<em>italic</em>" in html
        assert "<li>one</li>" in html

    def test_fenced_code_keeps_language_class(self, renderer):
        html = renderer.render("```python\nprint('hi')\n```\n")

        assert '<code class="language-python">' in html
        assert "<pre>" in html

    def test_tables(self, renderer):
        html = renderer.render("| a | b |\n|---|---|\n| 1 | 2 |\n")

        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_same_input_same_output(self, renderer):
        source = "## Notes\n\n1. first\n2. second\n\n[docs](https://example.com)"

        assert renderer.render(source) == renderer.render(source)
        assert renderer.render(source) == MarkdownRenderer().render(source)

    def test_empty_content(self, renderer):
        assert renderer.render("") == ""


class TestSanitizing:

    def test_script_tags_removed_with_their_body(self, renderer):
        html = renderer.render("before\n\n<script>steal(document.cookie)</script>\n\nafter")

        assert "<script" not in html
        assert "steal" not in html
        assert "before" in html
        assert "after" in html

    def test_event_handler_attributes_removed(self, renderer):
        html = renderer.render('<img src="https://example.com/x.png" onerror="alert(1)">')

        assert "onerror" not in html
        assert 'src="https://example.com/x.png"' in html

    def test_javascript_links_lose_href(self, renderer):
        html = renderer.render("[click me](javascript:alert)")

        assert "javascript:" not in html
        assert "click me" in html

    def test_links_get_rel(self, renderer):
        html = renderer.render("[site](https://example.com)")

        assert 'href="https://example.com"' in html
        assert 'rel="noopener noreferrer"' in html

    def test_iframe_removed(self, renderer):
        html = renderer.render('<iframe src="https://evil.example"></iframe>')

        assert "<iframe" not in html
