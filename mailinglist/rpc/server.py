"""gRPC server exposing the subscriber service."""
from __future__ import annotations

import logging
from concurrent import futures
from typing import Any

import grpc

from mailinglist.core.errors import (
    DuplicateEmailError,
    InvalidArgumentError,
    MailingListError,
)
from mailinglist.domain.subscribers import SubscriberEntry
from mailinglist.services.subscriber_service import SubscriberService

from . import METHODS, SERVICE_NAME, codec

logger = logging.getLogger(__name__)

Message = dict[str, Any]


def _abort(context: grpc.ServicerContext, exc: MailingListError, method: str) -> None:
    if isinstance(exc, InvalidArgumentError):
        context.abort(grpc.StatusCode.INVALID_ARGUMENT, str(exc))
    if isinstance(exc, DuplicateEmailError):
        context.abort(grpc.StatusCode.ALREADY_EXISTS, str(exc))
    logger.error("gRPC %s failed: %s", method, exc, exc_info=exc)
    context.abort(grpc.StatusCode.INTERNAL, "storage failure")


def _int_field(request: Message, name: str) -> int:
    value = request.get(name, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer")
    return value


def _email_field(request: Message) -> str:
    address = request.get("emailAddr")
    if not isinstance(address, str):
        raise InvalidArgumentError("emailAddr must be a string")
    return address


class MailingListServicer:
    """Translates gRPC messages to SubscriberService calls."""

    def __init__(self, service: SubscriberService) -> None:
        self.service = service

    def CreateEmail(self, request: Message, context: grpc.ServicerContext) -> Message:
        try:
            address = _email_field(request)
            logger.info("gRPC CreateEmail: %s", address)
            entry = self.service.create(address)
        except MailingListError as exc:
            _abort(context, exc, "CreateEmail")
        return {"emailEntry": entry.to_wire()}

    def GetEmail(self, request: Message, context: grpc.ServicerContext) -> Message:
        try:
            address = _email_field(request)
            logger.info("gRPC GetEmail: %s", address)
            entry = self.service.get(address)
        except MailingListError as exc:
            _abort(context, exc, "GetEmail")
        return {"emailEntry": entry.to_wire() if entry else None}

    def UpdateEmail(self, request: Message, context: grpc.ServicerContext) -> Message:
        try:
            payload = request.get("emailEntry")
            if not isinstance(payload, dict):
                raise InvalidArgumentError("emailEntry must be an object")
            logger.info("gRPC UpdateEmail: %s", payload.get("email"))
            try:
                entry = SubscriberEntry.from_wire(payload)
            except (TypeError, ValueError) as exc:
                raise InvalidArgumentError(f"malformed email entry: {exc}") from exc
            stored = self.service.update(entry)
        except MailingListError as exc:
            _abort(context, exc, "UpdateEmail")
        return {"emailEntry": stored.to_wire()}

    def DeleteEmail(self, request: Message, context: grpc.ServicerContext) -> Message:
        try:
            address = _email_field(request)
            logger.info("gRPC DeleteEmail: %s", address)
            entry = self.service.delete(address)
        except MailingListError as exc:
            _abort(context, exc, "DeleteEmail")
        return {"emailEntry": entry.to_wire() if entry else None}

    def GetEmailBatch(self, request: Message, context: grpc.ServicerContext) -> Message:
        try:
            page = _int_field(request, "page")
            count = _int_field(request, "count")
            logger.info("gRPC GetEmailBatch: %s/%s", page, count)
            result = self.service.list_page(page, count)
        except MailingListError as exc:
            _abort(context, exc, "GetEmailBatch")
        return {
            "page": result.page,
            "count": result.count,
            "total": result.total,
            "emailEntries": [entry.to_wire() for entry in result.entries],
        }


def _generic_handler(servicer: MailingListServicer) -> grpc.GenericRpcHandler:
    handlers = {
        name: grpc.unary_unary_rpc_method_handler(
            getattr(servicer, name),
            request_deserializer=codec.decode,
            response_serializer=codec.encode,
        )
        for name in METHODS
    }
    return grpc.method_handlers_generic_handler(SERVICE_NAME, handlers)


def create_server(service: SubscriberService, bind: str, *, max_workers: int = 10) -> tuple[grpc.Server, int]:
    """
    Build (but do not start) a gRPC server listening on ``bind``.

    ``":8001"`` listens on every interface. Returns the server and the bound
    port, which differs from the requested one when binding port 0.
    """
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="grpc"))
    server.add_generic_rpc_handlers((_generic_handler(MailingListServicer(service)),))
    address = f"[::]{bind}" if bind.startswith(":") else bind
    port = server.add_insecure_port(address)
    if not port:
        raise RuntimeError(f"gRPC server could not bind {bind}")
    return server, port
