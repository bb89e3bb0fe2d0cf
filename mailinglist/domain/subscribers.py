"""Subscriber entry value type and email helpers."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


def normalize_email(value: str | None) -> str:
    """Emails are compared case-insensitively: strip and lower-case."""
    return (value or "").strip().lower()


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    return bool(EMAIL_PATTERN.fullmatch(value))


def _optional_int(data: Mapping[str, Any], name: str) -> Optional[int]:
    value = data.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer or null")
    return value


@dataclass(frozen=True)
class SubscriberEntry:
    """
    One mailing-list record.

    ``confirmed_at`` is seconds since the epoch, or ``None`` when the address
    was never confirmed (``0`` is a real instant, the epoch itself).
    ``id`` is ``None`` only for entries not yet stored.
    """

    email: str
    confirmed_at: Optional[int] = None
    opt_out: bool = False
    id: Optional[int] = None

    def to_wire(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "confirmedAt": self.confirmed_at,
            "optOut": self.opt_out,
        }

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> "SubscriberEntry":
        """Build an entry from its wire form; wrongly typed fields raise TypeError."""
        email = data.get("email")
        if not isinstance(email, str):
            raise TypeError("email must be a string")
        opt_out = data.get("optOut", False)
        if not isinstance(opt_out, bool):
            raise TypeError("optOut must be a boolean")
        return cls(
            email=email,
            confirmed_at=_optional_int(data, "confirmedAt"),
            opt_out=opt_out,
            id=_optional_int(data, "id"),
        )
