"""
FastAPI routers.

Each module exposes an APIRouter included by ``mailinglist.app``; handlers
resolve the shared SubscriberService from ``app.state``.
"""
