import shutil
from pathlib import Path

import pytest
from starlette.testclient import TestClient

from txtwiki.config import TEMPLATE_DIR, WikiConfig
from txtwiki.main import create_app
from txtwiki.src.pages import PageStore


@pytest.fixture
def page_dir(tmp_path):
    return tmp_path / "pages"


@pytest.fixture
def store(page_dir):
    store = PageStore(page_dir)
    store.ensure_directory()
    return store


@pytest.fixture
def template_dir(tmp_path):
    """A writable copy of the packaged templates."""
    target = tmp_path / "template"
    shutil.copytree(TEMPLATE_DIR, target)
    return target


@pytest.fixture
def config(page_dir):
    return WikiConfig(page_dir=page_dir)


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    return TestClient(app)


def write_page(page_dir: Path, title: str, body: bytes) -> None:
    page_dir.mkdir(parents=True, exist_ok=True)
    (page_dir / f"{title}.txt").write_bytes(body)
