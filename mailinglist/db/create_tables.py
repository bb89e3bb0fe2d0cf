"""Idempotent creation of the subscriber table."""
from __future__ import annotations

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from mailinglist.core.errors import FatalSchemaError
from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata

logger = logging.getLogger(__name__)


def create_all(engine: Engine | None = None) -> None:
    """
    Ensure the ``emails`` table exists.

    Existing tables are left alone (``create_all`` checks first); any other
    schema failure is raised as FatalSchemaError.
    """
    engine = engine if engine is not None else get_engine()
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as exc:
        raise FatalSchemaError(f"Failed to create tables: {exc}") from exc
    logger.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    try:
        create_all()
        print("Database tables created successfully.")
    except FatalSchemaError as exc:
        raise SystemExit(str(exc)) from exc
