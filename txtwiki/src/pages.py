import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import InvalidTitle, PageNotFound
from .titles import is_valid_title

logger = logging.getLogger(__name__)

FILE_EXT = ".txt"
# owner read/write, only applied when the file is created
FILE_MODE = 0o600


@dataclass(frozen=True)
class Page:
    title: str
    body: bytes = b""

    def text(self, encoding="utf-8"):
        """Body decoded for display, bad bytes become U+FFFD."""
        return self.body.decode(encoding, errors="replace")


class PageStore(object):
    """
    Pages kept as plain files, <directory>/<title>.txt, holding nothing
    but the page body.

    There is no locking, two saves of the same page race and the last
    one to write wins.
    """

    def __init__(self, directory):
        self.directory = Path(directory)

    def file_path(self, title):
        # titles are checked again here, the filename is built straight from them
        if not is_valid_title(title):
            raise InvalidTitle(title)
        return os.path.join(self.directory, title + FILE_EXT)

    def ensure_directory(self):
        os.makedirs(self.directory, exist_ok=True)

    def exists(self, title):
        if not is_valid_title(title):
            return False
        return os.path.isfile(self.file_path(title))

    def load(self, title):
        file_path = self.file_path(title)
        try:
            with open(file_path, "rb") as file:
                body = file.read()
        except OSError as e:
            raise PageNotFound(title, e) from e
        return Page(title=title, body=body)

    def save(self, title, body):
        """Write body as the whole content of the page, replacing what was there."""
        file_path = self.file_path(title)
        if isinstance(body, str):
            body = body.encode("utf-8")
        if not isinstance(body, (bytes, bytearray)):
            # checked before the file is opened, opening truncates it
            raise TypeError(f"page body must be str or bytes, not {type(body).__name__}")
        body = bytes(body)

        fd = os.open(file_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "wb") as file:
            file.write(body)

        logger.info("Saved page %s (%d bytes)", title, len(body))
        return Page(title=title, body=body)
