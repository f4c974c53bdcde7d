"""Entry point for the Mailing List JSON API.

Builds the FastAPI application and serves it with Uvicorn.  The
database path and bind address come from the environment (see
``mailinglist_api.app.core.config``) and can be overridden on the
command line.

Usage:
    python run.py --db ./list.db --host 127.0.0.1 --port 8080 --log-file api.log
"""
import argparse
import asyncio
import dataclasses
import logging

from uvicorn import Config, Server

from mailinglist_api.app.core.config import settings
from mailinglist_api.app.main import create_app


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Mailing list JSON API server.")
    ap.add_argument("--db", default=settings.database_url, help="Path to the SQLite database file")
    ap.add_argument("--host", default=settings.json_api_host, help="Interface to listen on")
    ap.add_argument("--port", type=int, default=settings.json_api_port, help="Port to listen on")
    ap.add_argument("--log-file", default=settings.log_file, help="Also write log records to this file")
    return ap.parse_args(argv)


async def serve(args: argparse.Namespace) -> None:
    """Start the JSON API and block until the server stops."""
    app_settings = dataclasses.replace(
        settings,
        database_url=args.db,
        json_api_host=args.host,
        json_api_port=args.port,
        log_file=args.log_file,
    )
    app = create_app(app_settings)
    logging.getLogger(__name__).info("JSON API server listening on %s:%s", args.host, args.port)
    config = Config(app=app, host=args.host, port=args.port, reload=False, log_level=app_settings.log_level.lower())
    server = Server(config)
    await server.serve()


def main(argv=None) -> None:
    asyncio.run(serve(parse_args(argv)))


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
