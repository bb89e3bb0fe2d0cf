"""SQLAlchemy model for the subscriber table."""
from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, Column, Integer, String, false

from .session import Base


class Email(Base):
    __tablename__ = "emails"
    # AUTOINCREMENT keeps SQLite from reusing ids, so ids stay in creation order.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    confirmed_at = Column(BigInteger, nullable=True)
    opt_out = Column(Boolean, default=False, server_default=false(), nullable=False)
