"""
Process entry point: serve the JSON API and the gRPC API side by side.

Usage:
  mailinglist-server [--db list.db | --database-url URL] [--bind-json :8000] [--bind-grpc :8001]

Every flag falls back to its MAILINGLIST_* environment variable.
"""
from __future__ import annotations

import argparse
import logging
import signal
import threading

import uvicorn

from mailinglist.app import create_app
from mailinglist.core.config import Settings, get_settings, split_bind, sqlite_url
from mailinglist.core.errors import FatalSchemaError
from mailinglist.core.logging_config import configure_logging
from mailinglist.db.session import build_engine
from mailinglist.repositories.subscriber_repository import SubscriberRepository
from mailinglist.rpc import server as rpc_server
from mailinglist.services.subscriber_service import SubscriberService

logger = logging.getLogger(__name__)

SHUTDOWN_GRACE_SECONDS = 5


def parse_args(argv: list[str] | None, settings: Settings) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Mailing-list subscriber registry")
    db = ap.add_mutually_exclusive_group()
    db.add_argument("--db", help="SQLite database file (env MAILINGLIST_DB)")
    db.add_argument("--database-url", help="SQLAlchemy database URL (env DATABASE_URL)")
    ap.add_argument("--bind-json", default=settings.bind_json, help="JSON API bind address (env MAILINGLIST_BIND_JSON)")
    ap.add_argument("--bind-grpc", default=settings.bind_grpc, help="gRPC bind address (env MAILINGLIST_BIND_GRPC)")
    ap.add_argument("--log-level", default=settings.log_level, help="Logging level (env MAILINGLIST_LOG_LEVEL)")
    return ap.parse_args(argv)


def resolve_database_url(args: argparse.Namespace, settings: Settings) -> str:
    if args.database_url:
        return args.database_url
    if args.db:
        return sqlite_url(args.db)
    return settings.database_url


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    args = parse_args(argv, settings)
    configure_logging(args.log_level)

    database_url = resolve_database_url(args, settings)
    engine = build_engine(database_url)
    logger.info("Using database %s", engine.url.render_as_string(hide_password=True))

    repository = SubscriberRepository(engine)
    try:
        repository.initialize()
    except FatalSchemaError as exc:
        logger.critical("%s", exc)
        engine.dispose()
        raise SystemExit(1) from exc

    service = SubscriberService(repository, max_page_size=settings.max_page_size)

    try:
        host, port = split_bind(args.bind_json)
        grpc_server, grpc_port = rpc_server.create_server(service, args.bind_grpc, max_workers=settings.rpc_workers)
    except (ValueError, RuntimeError) as exc:
        logger.critical("Cannot listen: %s", exc)
        engine.dispose()
        raise SystemExit(1) from exc

    http_server = uvicorn.Server(uvicorn.Config(create_app(service), host=host, port=port, log_config=None))
    http_thread = threading.Thread(target=http_server.run, name="json-api")

    stop = threading.Event()

    def _request_stop(signum, _frame):
        logger.info("Received signal %s, shutting down", signum)
        stop.set()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)

    logger.info("Starting gRPC API on port %s", grpc_port)
    grpc_server.start()
    logger.info("Starting JSON API on %s:%s", host, port)
    http_thread.start()

    # Either a signal or the JSON server dying ends the process.
    while not stop.wait(0.5):
        if not http_thread.is_alive():
            logger.error("JSON API stopped unexpectedly")
            break

    http_server.should_exit = True
    grpc_server.stop(SHUTDOWN_GRACE_SECONDS).wait()
    http_thread.join()
    engine.dispose()
    logger.info("Shutdown complete")


if __name__ == "__main__":
    main()
