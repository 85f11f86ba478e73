"""Run the PyRecurMail HTTP API."""
from __future__ import annotations

import argparse
import logging

import uvicorn
from litestar import Litestar

from pyrecurmail import Settings, configure, create_scheduler, get_client
from pyrecurmail.api import create_app
from pyrecurmail.config import DISPATCHERS


def build_app(settings: Settings) -> Litestar:
    scheduler = create_scheduler(settings)
    configure(scheduler)
    return create_app(get_client())


def build_arg_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the PyRecurMail API server")
    parser.add_argument(
        "--dispatcher",
        choices=DISPATCHERS,
        default=settings.dispatcher,
        help="How emails are delivered; 'log' only logs them (env: PYRECURMAIL_DISPATCHER).",
    )
    parser.add_argument(
        "--default-interval",
        type=float,
        default=settings.default_interval_minutes,
        help="Minutes between sends when a request gives none "
        "(env: PYRECURMAIL_DEFAULT_INTERVAL_MINUTES).",
    )
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def main() -> None:
    settings = Settings.from_env()
    args = build_arg_parser(settings).parse_args()
    settings.dispatcher = args.dispatcher
    settings.default_interval_minutes = args.default_interval
    settings.log_level = args.log_level.upper()
    settings.validate()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = build_app(settings)
    logging.getLogger(__name__).info(f"Server running on port {args.port}")
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
