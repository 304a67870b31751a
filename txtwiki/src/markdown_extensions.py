"""Python-Markdown extensions used when rendering wiki pages."""

from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
import xml.etree.ElementTree as etree

from .titles import is_valid_title


WIKI_LINK_RE = r"\[\[([^\]]+)\]\]"  # matches [[PageName]] and [[PageName|text]]


class WikiLinkInlineProcessor(InlineProcessor):
    def __init__(self, pattern: str, config):
        super().__init__(pattern)
        self.base_url = config["base_url"].rstrip("/")
        self.page_exists_callback = config["page_exists_callback"]

    def handleMatch(self, m, data):
        raw_text = m.group(1).strip()

        # Pipe syntax [[Page|Text]]
        if "|" in raw_text:
            page_name, link_text = [p.strip() for p in raw_text.split("|", 1)]
        else:
            page_name, link_text = raw_text, None

        # Only page titles the server would accept become links,
        # anything else stays as plain text.
        if not is_valid_title(page_name):
            return None, None, None

        if not link_text:
            link_text = page_name

        el = etree.Element("a")
        el.set("href", f"{self.base_url}/{page_name}")
        el.text = link_text
        el.set("class", "wikilink")

        # Missing-page check
        if self.page_exists_callback is not None:
            if not self.page_exists_callback(page_name):
                el.set("class", "missing")

        return el, m.start(0), m.end(0)


class WikiLinkExtension(Extension):
    def __init__(self, **kwargs):
        # specify defaults first.
        self.config = {
            "base_url": ["/view", "Base URL for wiki links"],
            "page_exists_callback": [
                lambda x: True,
                "Function to check if a page exists",
            ],
        }
        # this super sets the config parameters and overwrites the defaults.
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        md.inlinePatterns.register(
            WikiLinkInlineProcessor(
                WIKI_LINK_RE,
                config=self.getConfigs(),
            ),
            "wikilink",
            175,
        )
