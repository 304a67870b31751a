"""Tests for txtwiki.src.rendering and the wiki-link markdown extension."""

import re

import pytest
from jinja2 import TemplateNotFound, TemplateSyntaxError

from txtwiki.config import TEMPLATE_DIR
from txtwiki.src.errors import RenderError
from txtwiki.src.pages import Page
from txtwiki.src.rendering import Renderer


def link_attributes(html, text):
    """Attributes of the <a> whose text is `text`, in whatever order they were written."""
    m = re.search(r"<a ([^>]*)>" + re.escape(text) + r"</a>", html)
    assert m is not None, f"no link to {text} in {html}"
    return dict(re.findall(r'(\w+)="([^"]*)"', m.group(1)))


@pytest.fixture
def renderer(store):
    return Renderer.load(TEMPLATE_DIR, page_exists=store.exists)


def test_loads_both_templates(renderer):
    assert sorted(renderer.templates) == ["edit", "view"]


def test_templates_are_read_only(renderer):
    with pytest.raises(TypeError):
        renderer.templates["view"] = None


def test_view_shows_title_and_body(renderer):
    html = renderer.render("view", Page(title="TestPage", body=b"This is a sample Page."))

    assert "<h1>TestPage</h1>" in html
    assert "This is a sample Page." in html
    assert 'href="/edit/TestPage"' in html


def test_edit_form_posts_to_save(renderer):
    html = renderer.render("edit", Page(title="TestPage", body=b"old text"))

    assert 'action="/save/TestPage"' in html
    assert 'name="body"' in html
    assert ">old text</textarea>" in html


def test_edit_escapes_body(renderer):
    html = renderer.render("edit", Page(title="Html", body=b"</textarea><script>"))

    assert "</textarea><script>" not in html
    assert "&lt;/textarea&gt;&lt;script&gt;" in html


def test_markdown_body(renderer):
    html = renderer.render("view", Page(title="Md", body=b"# Heading\n\nsome *emphasis*"))

    assert "<h1>Heading</h1>" in html
    assert "<em>emphasis</em>" in html


def test_wiki_links(renderer, store):
    store.save("Other", "exists")

    html = renderer.render("view", Page(title="Links", body=b"see [[Other]] and [[Ghost]]"))

    other = link_attributes(html, "Other")
    assert other["href"] == "/view/Other"
    assert other["class"] == "wikilink"

    ghost = link_attributes(html, "Ghost")
    assert ghost["href"] == "/view/Ghost"
    assert ghost["class"] == "missing"


def test_wiki_link_label(renderer):
    html = renderer.render("view", Page(title="Links", body=b"[[FrontPage|the start]]"))

    assert 'href="/view/FrontPage"' in html
    assert ">the start</a>" in html


def test_wiki_link_with_invalid_title_stays_text(renderer):
    html = renderer.render("view", Page(title="Links", body=b"[[My Page]]"))

    assert "[[My Page]]" in html
    assert "/view/My" not in html


def test_text_markup_escapes_body(store):
    renderer = Renderer.load(TEMPLATE_DIR, markup="text", page_exists=store.exists)

    html = renderer.render("view", Page(title="Plain", body=b"<b>hi</b> [[Other]]"))

    assert "&lt;b&gt;hi&lt;/b&gt;" in html
    assert "[[Other]]" in html
    assert "<b>hi</b>" not in html


def test_undecodable_body_renders(renderer):
    html = renderer.render("view", Page(title="Bytes", body=b"caf\xe9"))
    assert "caf�" in html


def test_missing_template_fails_to_load(template_dir):
    (template_dir / "edit.html").unlink()

    with pytest.raises(TemplateNotFound):
        Renderer.load(template_dir)


def test_malformed_template_fails_to_load(template_dir):
    (template_dir / "view.html").write_text("{% if %}")

    with pytest.raises(TemplateSyntaxError):
        Renderer.load(template_dir)


def test_template_error_while_rendering(template_dir):
    (template_dir / "view.html").write_text("{{ page.body.nowhere.deeper }}")
    renderer = Renderer.load(template_dir)

    with pytest.raises(RenderError):
        renderer.render("view", Page(title="Broken", body=b""))
