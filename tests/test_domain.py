from __future__ import annotations

import pytest

from mailinglist.domain.subscribers import SubscriberEntry, is_valid_email, normalize_email


def test_normalize_email_strips_and_lowercases():
    assert normalize_email("  Bob@Example.ORG\n") == "bob@example.org"
    assert normalize_email(None) == ""


def test_is_valid_email():
    assert is_valid_email("bob@example.org")
    assert not is_valid_email("bob@example")
    assert not is_valid_email("bob example@example.org")


def test_from_wire_keeps_null_and_zero_confirmation_apart():
    unset = SubscriberEntry.from_wire({"email": "a@example.com", "confirmedAt": None})
    epoch = SubscriberEntry.from_wire({"email": "a@example.com", "confirmedAt": 0, "optOut": True, "id": 3})

    assert unset.confirmed_at is None
    assert unset.opt_out is False
    assert epoch.confirmed_at == 0
    assert epoch.to_wire() == {"id": 3, "email": "a@example.com", "confirmedAt": 0, "optOut": True}


@pytest.mark.parametrize(
    "data",
    [
        {"email": "a@example.com", "optOut": "false"},
        {"email": "a@example.com", "optOut": 0},
        {"email": "a@example.com", "confirmedAt": 1.9},
        {"email": "a@example.com", "confirmedAt": "123"},
        {"email": "a@example.com", "confirmedAt": False},
        {"email": "a@example.com", "id": "7"},
        {"email": 42},
        {},
    ],
)
def test_from_wire_rejects_wrongly_typed_fields(data):
    with pytest.raises(TypeError):
        SubscriberEntry.from_wire(data)
