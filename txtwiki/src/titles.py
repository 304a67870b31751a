import enum
import re

from .errors import InvalidPath

TITLE_RE = re.compile(r"[a-zA-Z0-9]+")
VALID_PATH_RE = re.compile(r"/(edit|save|view)/([a-zA-Z0-9]+)")


class Operation(enum.Enum):
    VIEW = "view"
    EDIT = "edit"
    SAVE = "save"


def is_valid_title(title):
    """True if title is one or more ASCII letters or digits"""
    return isinstance(title, str) and TITLE_RE.fullmatch(title) is not None


def parse_path(path):
    """
    Split a request path like /view/FrontPage into (Operation.VIEW, "FrontPage").

    The whole path has to match, so /view/a/b, /view/My%20Page or
    /view/Page/ are all rejected with InvalidPath.
    """
    m = VALID_PATH_RE.fullmatch(path)
    if m is None:
        raise InvalidPath(path)
    return Operation(m.group(1)), m.group(2)
