"""
Persistence adapters.

The subscriber repository is the only module that talks to the database;
services and transports depend on it rather than on SQLAlchemy sessions.
"""

from .subscriber_repository import SubscriberRepository

__all__ = ["SubscriberRepository"]
