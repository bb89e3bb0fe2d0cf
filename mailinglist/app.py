"""FastAPI application factory for the JSON API."""
from __future__ import annotations

from fastapi import FastAPI

from mailinglist import __version__
from mailinglist.routers import emails as emails_router
from mailinglist.services.subscriber_service import SubscriberService


def create_app(subscriber_service: SubscriberService) -> FastAPI:
    """Build the JSON API around an already initialized service."""
    app = FastAPI(title="Mailing List API", version=__version__)
    app.state.subscriber_service = subscriber_service
    app.include_router(emails_router.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
