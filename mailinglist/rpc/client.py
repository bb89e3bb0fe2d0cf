"""Thin gRPC client for the mailing-list service."""
from __future__ import annotations

from typing import Any, Optional

import grpc

from mailinglist.domain.subscribers import SubscriberEntry

from . import METHODS, SERVICE_NAME, codec

DEFAULT_TIMEOUT = 1.0


def _entry_or_none(response: dict[str, Any]) -> Optional[SubscriberEntry]:
    data = response.get("emailEntry")
    return SubscriberEntry.from_wire(data) if data else None


class MailingListClient:
    """
    Calls the MailingListService with a bounded per-call deadline.

    Failed calls raise ``grpc.RpcError``; use ``.code()`` to tell a duplicate
    (ALREADY_EXISTS) or bad input (INVALID_ARGUMENT) from a server failure.
    """

    def __init__(self, target: str, *, timeout: float = DEFAULT_TIMEOUT, channel: grpc.Channel | None = None) -> None:
        self.timeout = timeout
        self.channel = channel if channel is not None else grpc.insecure_channel(target)
        self._calls = {
            name: self.channel.unary_unary(
                f"/{SERVICE_NAME}/{name}",
                request_serializer=codec.encode,
                response_deserializer=codec.decode,
            )
            for name in METHODS
        }

    def _call(self, method: str, request: dict[str, Any]) -> dict[str, Any]:
        return self._calls[method](request, timeout=self.timeout)

    def create_email(self, address: str) -> Optional[SubscriberEntry]:
        return _entry_or_none(self._call("CreateEmail", {"emailAddr": address}))

    def get_email(self, address: str) -> Optional[SubscriberEntry]:
        return _entry_or_none(self._call("GetEmail", {"emailAddr": address}))

    def update_email(self, entry: SubscriberEntry) -> Optional[SubscriberEntry]:
        return _entry_or_none(self._call("UpdateEmail", {"emailEntry": entry.to_wire()}))

    def delete_email(self, address: str) -> Optional[SubscriberEntry]:
        return _entry_or_none(self._call("DeleteEmail", {"emailAddr": address}))

    def get_email_batch(self, page: int, count: int) -> list[SubscriberEntry]:
        response = self._call("GetEmailBatch", {"page": page, "count": count})
        return [SubscriberEntry.from_wire(item) for item in response.get("emailEntries") or []]

    def close(self) -> None:
        self.channel.close()

    def __enter__(self) -> "MailingListClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
