"""Tests for the markdown rendering and sanitizing pipeline."""

import pytest

from forum_core.services import ContentSanitizer


@pytest.fixture(scope="module")
def sanitizer() -> ContentSanitizer:
    return ContentSanitizer()


@pytest.mark.parametrize("source", ["", None])
def test_empty_input_renders_empty_string(sanitizer, source) -> None:
    assert sanitizer.render(source) == ""
    assert sanitizer.clean(source) == ""


def test_script_tags_are_removed(sanitizer) -> None:
    html = sanitizer.render("<script>alert(1)</script>")
    assert "<script" not in html.lower()


def test_inline_event_handlers_are_removed(sanitizer) -> None:
    html = sanitizer.render('<img src="https://example.com/a.png" onerror="alert(1)">')
    assert "onerror" not in html
    assert "alert(1)" not in html


def test_javascript_links_lose_their_href(sanitizer) -> None:
    html = sanitizer.render("[click](javascript:alert(1))")
    assert 'href="javascript' not in html

    raw = sanitizer.render('<a href="javascript:alert(1)">x</a>')
    assert "javascript:" not in raw
    assert ">x</a>" in raw


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/",
        "http://example.com/",
        "mailto:someone@example.com",
        "tel:+15555550100",
    ],
)
def test_safe_schemes_are_kept(sanitizer, url) -> None:
    html = sanitizer.render(f"[link]({url})")
    assert f'href="{url}"' in html


def test_markdown_structure_is_rendered(sanitizer) -> None:
    html = sanitizer.render("# Title\n\nSome **bold** and *em* and ~~gone~~\n\n- a\n- b")
    assert '<h1 id="title">Title</h1>' in html
    assert "<strong>bold</strong>" in html
    assert "<em>em</em>" in html
    assert "<s>gone</s>" in html
    assert "<li>a</li>" in html


def test_line_breaks_become_br(sanitizer) -> None:
    assert "<br>" in sanitizer.render("first line\nsecond line")


def test_tables_are_supported(sanitizer) -> None:
    html = sanitizer.render("| a | b |\n|---|---|\n| 1 | 2 |")
    assert "<table>" in html
    assert "<td>1</td>" in html


def test_bare_urls_are_linkified(sanitizer) -> None:
    assert '<a href="https://example.com">' in sanitizer.render("see https://example.com")


def test_fenced_code_keeps_language_class(sanitizer) -> None:
    html = sanitizer.render("```python\nprint('x')\n```")
    assert '<code class="language-python">' in html
    assert "<pre>" in html


def test_disallowed_attributes_are_dropped(sanitizer) -> None:
    html = sanitizer.render('<div class="note" style="color:red" data-x="1">hi</div>')
    assert 'class="note"' in html
    assert "style" not in html
    assert "data-x" not in html


def test_unknown_tags_are_stripped_not_escaped(sanitizer) -> None:
    html = sanitizer.render("<iframe src='https://evil.example'></iframe>hello")
    assert "iframe" not in html
    assert "&lt;" not in html


def test_every_heading_level_gets_an_id(sanitizer) -> None:
    html = sanitizer.render("## Second Level\n\n###### Deep Heading")
    assert '<h2 id="second-level">Second Level</h2>' in html
    assert '<h6 id="deep-heading">Deep Heading</h6>' in html


def test_new_window_links_cannot_reach_opener(sanitizer) -> None:
    html = sanitizer.render('<a href="https://example.com" target="_blank" rel="opener">x</a>')
    assert 'target="_blank"' in html
    assert 'rel="noopener noreferrer"' in html
    assert 'rel="opener"' not in html


def test_same_window_links_are_left_alone(sanitizer) -> None:
    html = sanitizer.render("[home](https://example.com)")
    assert "rel=" not in html
