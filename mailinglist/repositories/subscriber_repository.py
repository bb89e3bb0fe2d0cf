"""Subscriber store backed by SQLAlchemy."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from mailinglist.core.errors import DuplicateEmailError, InvalidArgumentError, StorageError
from mailinglist.db import create_tables
from mailinglist.db.models import Email
from mailinglist.db.session import get_engine
from mailinglist.domain.subscribers import SubscriberEntry, normalize_email

_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _to_entry(row: Email) -> SubscriberEntry:
    return SubscriberEntry(
        id=row.id,
        email=row.email,
        confirmed_at=row.confirmed_at,
        opt_out=bool(row.opt_out),
    )


class SubscriberRepository:
    """
    Sole owner of the ``emails`` table.

    Every public method runs in its own short session and issues a single
    write statement, so one instance can be shared by concurrent request
    handlers without extra locking. Database failures are raised as
    StorageError; nothing is logged here.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        self.engine = engine if engine is not None else get_engine()
        self._sessionmaker = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, future=True)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session: Session = self._sessionmaker()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(str(exc)) from exc
        finally:
            session.close()

    def initialize(self) -> None:
        create_tables.create_all(self.engine)

    def create(self, email: str) -> SubscriberEntry:
        address = normalize_email(email)
        entity = Email(email=address, confirmed_at=None, opt_out=False)
        with self._session() as session:
            session.add(entity)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError(address) from exc
            session.refresh(entity)
            return _to_entry(entity)

    def get(self, email: str) -> Optional[SubscriberEntry]:
        stmt = select(Email).where(Email.email == normalize_email(email))
        with self._session() as session:
            row = session.execute(stmt).scalar_one_or_none()
            return _to_entry(row) if row is not None else None

    def upsert(self, entry: SubscriberEntry) -> SubscriberEntry:
        """Insert the entry, or update confirmed_at/opt_out of the existing row, in one statement."""
        address = normalize_email(entry.email)
        insert = _UPSERT_INSERTS.get(self.engine.dialect.name)
        if insert is None:
            raise StorageError(f"upsert is not supported on {self.engine.dialect.name}")
        stmt = insert(Email).values(
            email=address,
            confirmed_at=entry.confirmed_at,
            opt_out=entry.opt_out,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Email.email],
            set_={
                "confirmed_at": stmt.excluded.confirmed_at,
                "opt_out": stmt.excluded.opt_out,
            },
        )
        with self._session() as session:
            session.execute(stmt)
            session.commit()
            row = session.execute(select(Email).where(Email.email == address)).scalar_one()
            return _to_entry(row)

    def soft_delete(self, email: str) -> None:
        stmt = update(Email).where(Email.email == normalize_email(email)).values(opt_out=True)
        with self._session() as session:
            session.execute(stmt)
            session.commit()

    def list_page(self, page: int, page_size: int) -> list[SubscriberEntry]:
        """Active (not opted-out) entries in creation order, 1-based pages."""
        if page < 1 or page_size < 1:
            raise InvalidArgumentError("page and page size must be positive")
        stmt = (
            select(Email)
            .where(Email.opt_out.is_(False))
            .order_by(Email.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        with self._session() as session:
            return [_to_entry(row) for row in session.execute(stmt).scalars()]

    def count_active(self) -> int:
        stmt = select(func.count()).select_from(Email).where(Email.opt_out.is_(False))
        with self._session() as session:
            return int(session.execute(stmt).scalar_one())
