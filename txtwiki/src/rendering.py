import logging
from types import MappingProxyType

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from markupsafe import Markup, escape

import markdown

from .errors import RenderError
from .markdown_extensions import WikiLinkExtension

logger = logging.getLogger(__name__)

TEMPLATE_NAMES = ("view", "edit")

MD_EXTENSIONS = [
    "extra",
    "sane_lists",
    "nl2br",
    # WikiLinkExtension(), added per render with the page exists callback
]
# these configs are only for builtin extensions
MD_EXTENSION_CONFIG = {
    "extra": {
        "footnotes": {
            "UNIQUE_IDS": False,
            "BACKLINK_TEXT": "&#8617;",
        },
        "tables": {
            "use_align_attribute": False
        },  # True to use "align" instead of style attribute
    },
    "nl2br": {},  # no config, treat new lines as hard breaks
}


class Renderer(object):
    """
    The view and edit templates, loaded once and shared by every request.

    `page_exists` is used to tell wiki links to existing pages from links
    to pages that haven't been written yet.
    """

    def __init__(
        self,
        templates,
        markup="markdown",
        front_page="FrontPage",
        page_exists=None,
        encoding="utf-8",
    ):
        self.templates = MappingProxyType(dict(templates))
        self.markup = markup
        self.front_page = front_page
        self.page_exists = page_exists
        self.encoding = encoding

    @classmethod
    def load(cls, template_dir, **kwargs):
        """
        Read view.html and edit.html from template_dir.

        A missing or broken template raises jinja2's TemplateNotFound or
        TemplateSyntaxError, there is nothing sensible to serve without them.
        """
        jinja_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )
        templates = {
            name: jinja_env.get_template(f"{name}.html") for name in TEMPLATE_NAMES
        }
        logger.info("Loaded templates %s from %s", ", ".join(TEMPLATE_NAMES), template_dir)
        return cls(templates, **kwargs)

    def to_html(self, text):
        if self.markup == "text":
            return escape(text)

        md = markdown.Markdown(
            extensions=MD_EXTENSIONS
            + [
                WikiLinkExtension(
                    base_url="/view",
                    page_exists_callback=self.page_exists,
                )
            ],
            extension_configs=MD_EXTENSION_CONFIG,
            output_format="html",
        )
        return Markup(md.convert(text))

    def render(self, name, page):
        text = page.text(self.encoding)
        doc_data = {
            "page": page,
            "title": page.title,
            "body": text,
            "front_page": self.front_page,
        }
        if name == "view":
            doc_data["content"] = self.to_html(text)

        try:
            return self.templates[name].render(doc_data)
        except TemplateError as e:
            raise RenderError(str(e)) from e
