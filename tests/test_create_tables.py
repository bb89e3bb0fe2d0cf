from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from mailinglist.core.errors import FatalSchemaError
from mailinglist.db import create_tables


def test_create_all_creates_emails_table(engine):
    create_tables.create_all(engine)

    columns = {col["name"] for col in inspect(engine).get_columns("emails")}
    assert columns == {"id", "email", "confirmed_at", "opt_out"}


def test_create_all_twice_is_not_an_error(engine):
    create_tables.create_all(engine)
    create_tables.create_all(engine)

    assert inspect(engine).has_table("emails")


def test_other_schema_errors_are_fatal(engine, monkeypatch):
    def boom(*args, **kwargs):
        raise OperationalError("CREATE TABLE emails", {}, Exception("disk I/O error"))

    monkeypatch.setattr(create_tables, "Base", SimpleNamespace(metadata=SimpleNamespace(create_all=boom)))

    with pytest.raises(FatalSchemaError):
        create_tables.create_all(engine)
