"""``txtwiki`` / ``python -m txtwiki``: serve the wiki with uvicorn."""

import argparse
import dataclasses
import logging
import sys

import uvicorn
from jinja2 import TemplateError

from .config import MARKUPS, WikiConfig
from .main import create_app
from .src.errors import ConfigError

logger = logging.getLogger("txtwiki")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="txtwiki", description="Serve a wiki of plain text pages."
    )
    parser.add_argument("--host", help="interface to listen on")
    parser.add_argument("--port", type=int, help="port to listen on")
    parser.add_argument("--pages", help="directory holding the <Title>.txt files")
    parser.add_argument("--templates", help="directory holding view.html and edit.html")
    parser.add_argument("--markup", choices=MARKUPS, help="how page bodies are shown")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser


def load_config(args):
    """Environment first, then whatever was given on the command line."""
    config = WikiConfig.from_env()
    overrides = {
        "host": args.host,
        "port": args.port,
        "page_dir": args.pages,
        "template_dir": args.templates,
        "markup": args.markup,
        "log_level": args.log_level.upper() if args.log_level else None,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return dataclasses.replace(config, **overrides)


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        app = create_app(config)
    except (TemplateError, OSError) as exc:
        logger.critical("Cannot start the wiki: %s", exc)
        raise SystemExit(1) from exc

    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
