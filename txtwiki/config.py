import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .src.errors import ConfigError
from .src.titles import is_valid_title

#
# Directory holding the page files, one <Title>.txt per page.
# Created at startup if it doesn't exist.
#
PAGE_DIR = "pages"

#
# Directory holding view.html and edit.html, which are Jinja templates.
# Both are loaded once at startup.
#
TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "template")

#
# The page / redirects to.
#
FRONT_PAGE = "FrontPage"

#
# How a page body is shown on the view page.
# "markdown" converts it with Python-Markdown, "text" shows it escaped as is.
#
MARKUP = "markdown"
MARKUPS = ("text", "markdown")

HOST = "127.0.0.1"
PORT = 8080

LOG_LEVEL = "INFO"

#
# Page bodies are stored as raw bytes, this is only used to show them.
#
DEFAULT_ENCODING = "utf-8"

ENV_PREFIX = "TXTWIKI_"


@dataclass(frozen=True)
class WikiConfig:
    """Settings for one wiki process, built once at startup."""

    page_dir: Path = Path(PAGE_DIR)
    template_dir: Path = Path(TEMPLATE_DIR)
    front_page: str = FRONT_PAGE
    markup: str = MARKUP
    host: str = HOST
    port: int = PORT
    log_level: str = LOG_LEVEL
    debug: bool = False

    def __post_init__(self):
        # accept plain strings for the directories
        object.__setattr__(self, "page_dir", Path(self.page_dir))
        object.__setattr__(self, "template_dir", Path(self.template_dir))

        if self.markup not in MARKUPS:
            raise ConfigError(
                f"markup must be one of {', '.join(MARKUPS)}, got {self.markup!r}"
            )
        if not is_valid_title(self.front_page):
            raise ConfigError(f"front page {self.front_page!r} is not a valid title")
        if not 0 < self.port < 65536:
            raise ConfigError(f"port {self.port} is out of range")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls, environ=None):
        """Build a config from TXTWIKI_* environment variables."""
        if environ is None:
            environ = os.environ

        def env(name, default):
            return environ.get(ENV_PREFIX + name, default)

        port = env("PORT", str(PORT))
        try:
            port = int(port)
        except ValueError as e:
            raise ConfigError(f"{ENV_PREFIX}PORT must be an integer, got {port!r}") from e

        return cls(
            page_dir=env("PAGE_DIR", PAGE_DIR),
            template_dir=env("TEMPLATE_DIR", TEMPLATE_DIR),
            front_page=env("FRONT_PAGE", FRONT_PAGE),
            markup=env("MARKUP", MARKUP).lower(),
            host=env("HOST", HOST),
            port=port,
            log_level=env("LOG_LEVEL", LOG_LEVEL).upper(),
            debug=env("DEBUG", "false").lower() in ("1", "true", "yes"),
        )
