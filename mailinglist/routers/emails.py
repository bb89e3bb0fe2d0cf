"""JSON API for subscriber entries."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from mailinglist.core.errors import DuplicateEmailError, InvalidArgumentError, StorageError
from mailinglist.domain.subscribers import SubscriberEntry
from mailinglist.services.subscriber_service import SubscriberService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/email", tags=["email"])


class EmailRequest(BaseModel):
    email: str


class EntryPayload(BaseModel):
    id: Optional[int] = None
    email: str
    confirmedAt: Optional[int] = None
    optOut: bool = False


class EntryResponse(BaseModel):
    id: int
    email: str
    confirmedAt: Optional[int] = None
    optOut: bool


class BatchResponse(BaseModel):
    page: int
    count: int
    total: int
    entries: list[EntryResponse]


def _get_service(request: Request) -> SubscriberService:
    svc = getattr(getattr(request.app, "state", None), "subscriber_service", None)
    if not svc:
        raise RuntimeError("SubscriberService not configured")
    return svc


def _to_response(entry: SubscriberEntry) -> EntryResponse:
    return EntryResponse(**entry.to_wire())


def _http_error(exc: Exception, operation: str) -> HTTPException:
    if isinstance(exc, InvalidArgumentError):
        return HTTPException(400, str(exc))
    if isinstance(exc, DuplicateEmailError):
        return HTTPException(409, str(exc))
    logger.error("JSON %s failed: %s", operation, exc, exc_info=exc)
    return HTTPException(500, "storage failure")


@router.post("/create", response_model=EntryResponse)
def create_email(payload: EmailRequest, request: Request):
    svc = _get_service(request)
    logger.info("JSON CreateEmail: %s", payload.email)
    try:
        entry = svc.create(payload.email)
    except (InvalidArgumentError, DuplicateEmailError, StorageError) as exc:
        raise _http_error(exc, "CreateEmail") from exc
    return _to_response(entry)


@router.get("/get", response_model=EntryResponse)
def get_email(request: Request, email: str = Query(...)):
    svc = _get_service(request)
    logger.info("JSON GetEmail: %s", email)
    try:
        entry = svc.get(email)
    except (InvalidArgumentError, StorageError) as exc:
        raise _http_error(exc, "GetEmail") from exc
    if entry is None:
        raise HTTPException(404, "email not found")
    return _to_response(entry)


@router.get("/get/batch", response_model=BatchResponse)
def get_email_batch(request: Request, page: int = Query(...), count: int = Query(...)):
    svc = _get_service(request)
    logger.info("JSON GetEmailBatch: %s/%s", page, count)
    try:
        result = svc.list_page(page, count)
    except (InvalidArgumentError, StorageError) as exc:
        raise _http_error(exc, "GetEmailBatch") from exc
    return BatchResponse(
        page=result.page,
        count=result.count,
        total=result.total,
        entries=[_to_response(entry) for entry in result.entries],
    )


@router.put("/update", response_model=EntryResponse)
def update_email(payload: EntryPayload, request: Request):
    svc = _get_service(request)
    logger.info("JSON UpdateEmail: %s", payload.email)
    entry = SubscriberEntry(email=payload.email, confirmed_at=payload.confirmedAt, opt_out=payload.optOut)
    try:
        stored = svc.update(entry)
    except (InvalidArgumentError, StorageError) as exc:
        raise _http_error(exc, "UpdateEmail") from exc
    return _to_response(stored)


@router.delete("/delete", response_model=Optional[EntryResponse])
def delete_email(payload: EmailRequest, request: Request):
    svc = _get_service(request)
    logger.info("JSON DeleteEmail: %s", payload.email)
    try:
        entry = svc.delete(payload.email)
    except (InvalidArgumentError, StorageError) as exc:
        raise _http_error(exc, "DeleteEmail") from exc
    # Opting out an unknown address is a no-op; the body is null.
    return _to_response(entry) if entry is not None else None
