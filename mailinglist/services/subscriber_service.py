"""Subscriber use cases (validation, lookup, pagination)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from mailinglist.core.errors import InvalidArgumentError
from mailinglist.domain.subscribers import SubscriberEntry, is_valid_email, normalize_email
from mailinglist.repositories.subscriber_repository import SubscriberRepository

DEFAULT_MAX_PAGE_SIZE = 100


@dataclass
class Page:
    page: int
    count: int
    total: int
    entries: list[SubscriberEntry]


class SubscriberService:
    """Validates transport input and delegates to the subscriber repository."""

    def __init__(self, repository: SubscriberRepository, *, max_page_size: int = DEFAULT_MAX_PAGE_SIZE) -> None:
        self.repository = repository
        self.max_page_size = max_page_size

    def _require_email(self, value: str | None) -> str:
        address = normalize_email(value)
        if not is_valid_email(address):
            raise InvalidArgumentError(f"invalid email address: {value!r}")
        return address

    def validate_page(self, page: int, count: int) -> None:
        if page < 1 or count < 1:
            raise InvalidArgumentError("invalid count or page")
        if count > self.max_page_size:
            raise InvalidArgumentError(f"count must not exceed {self.max_page_size}")

    def create(self, email: str | None) -> SubscriberEntry:
        return self.repository.create(self._require_email(email))

    def get(self, email: str | None) -> Optional[SubscriberEntry]:
        return self.repository.get(self._require_email(email))

    def update(self, entry: SubscriberEntry) -> SubscriberEntry:
        address = self._require_email(entry.email)
        return self.repository.upsert(SubscriberEntry(
            email=address,
            confirmed_at=entry.confirmed_at,
            opt_out=entry.opt_out,
        ))

    def delete(self, email: str | None) -> Optional[SubscriberEntry]:
        """Opt the address out and return its entry (None when it never existed)."""
        address = self._require_email(email)
        self.repository.soft_delete(address)
        return self.repository.get(address)

    def list_page(self, page: int, count: int) -> Page:
        self.validate_page(page, count)
        entries = self.repository.list_page(page, count)
        return Page(page=page, count=count, total=self.repository.count_active(), entries=entries)
