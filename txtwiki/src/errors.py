class WikiError(Exception):
    """Base class for errors raised by the wiki."""


class InvalidPath(WikiError):
    """A request path is not /view/, /edit/ or /save/ followed by a title."""

    def __init__(self, path):
        super().__init__(f"Invalid page path: {path!r}")
        self.path = path


class InvalidTitle(WikiError, ValueError):
    """A title with anything but ASCII letters and digits reached the store."""

    def __init__(self, title):
        super().__init__(f"Invalid page title: {title!r}")
        self.title = title


class PageNotFound(WikiError, LookupError):
    """
    A page could not be read.

    Missing files and unreadable files look the same here, the OSError
    behind it is kept in `error` (and as __cause__).
    """

    def __init__(self, title, error=None):
        super().__init__(f"Page not found: {title}")
        self.title = title
        self.error = error


class RenderError(WikiError):
    """A template failed while rendering a page."""


class ConfigError(WikiError, ValueError):
    pass
