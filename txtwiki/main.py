import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from starlette.routing import Route

from .config import DEFAULT_ENCODING, WikiConfig
from .src.errors import InvalidPath, PageNotFound, RenderError
from .src.pages import Page, PageStore
from .src.rendering import Renderer
from .src.titles import Operation, parse_path

logger = logging.getLogger(__name__)

# the wiki doesn't care which method a request uses
METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


@dataclass(frozen=True)
class Wiki:
    """Everything a request handler needs, built once in create_app."""

    config: WikiConfig
    store: PageStore
    renderer: Renderer


async def render_page(wiki, name, page):
    try:
        html = await run_in_threadpool(wiki.renderer.render, name, page)
    except RenderError as e:
        logger.error("Rendering %s for %s failed: %s", name, page.title, e)
        return PlainTextResponse(str(e), status_code=500)
    return HTMLResponse(html)


# /view/<title>
async def view_page(request, wiki, title):
    try:
        page = await run_in_threadpool(wiki.store.load, title)
    except PageNotFound:
        return RedirectResponse(f"/edit/{title}", status_code=302)
    return await render_page(wiki, "view", page)


# /edit/<title>
async def edit_page(request, wiki, title):
    try:
        page = await run_in_threadpool(wiki.store.load, title)
    except PageNotFound:
        # page doesn't exist yet, start from a blank form
        page = Page(title=title)
    return await render_page(wiki, "edit", page)


# /save/<title> process page saves
async def save_page(request, wiki, title):
    form = await request.form()
    body = form.get("body")
    if body is None:
        body = request.query_params.get("body", "")
    elif isinstance(body, UploadFile):
        # a file posted as the body field becomes the page body
        body = await body.read()

    try:
        await run_in_threadpool(wiki.store.save, title, body)
    except OSError as e:
        logger.error("Saving %s failed: %s", title, e)
        return PlainTextResponse(str(e), status_code=500)
    return RedirectResponse(f"/view/{title}", status_code=302)


HANDLERS = {
    Operation.VIEW: view_page,
    Operation.EDIT: edit_page,
    Operation.SAVE: save_page,
}


async def dispatch(request):
    try:
        # the decoded ASGI path, request.url would split a decoded %23 or %3F off
        operation, title = parse_path(request.scope["path"])
    except InvalidPath:
        raise HTTPException(status_code=404)

    handler = HANDLERS[operation]
    return await handler(request, request.app.state.wiki, title)


async def front_page(request):
    wiki = request.app.state.wiki
    return RedirectResponse(f"/view/{wiki.config.front_page}", status_code=302)


@asynccontextmanager
async def lifespan(app):
    # --- Startup ---
    wiki = app.state.wiki
    logger.info("Serving pages from %s", wiki.store.directory)

    yield

    # --- Shutdown ---
    logger.info("Wiki shutting down")


routes = [
    Route("/", endpoint=front_page, methods=METHODS),
    Route("/{path:path}", endpoint=dispatch, methods=METHODS),
]


def create_app(config=None):
    """
    Build the wiki application.

    The page directory is created if needed and both templates are loaded
    here, so a broken template stops the process before it serves anything.
    """
    if config is None:
        config = WikiConfig.from_env()

    store = PageStore(config.page_dir)
    store.ensure_directory()

    renderer = Renderer.load(
        config.template_dir,
        markup=config.markup,
        front_page=config.front_page,
        page_exists=store.exists,
        encoding=DEFAULT_ENCODING,
    )

    app = Starlette(debug=config.debug, routes=routes, lifespan=lifespan)
    app.state.wiki = Wiki(config=config, store=store, renderer=renderer)

    logger.info(
        "Wiki ready: pages in %s, templates in %s, %s markup",
        config.page_dir,
        config.template_dir,
        config.markup,
    )
    return app
