#!/usr/bin/env python3
"""
Register a subscriber directly in the database, bypassing the APIs.

Usage:
  python scripts/add_subscriber.py --email someone@example.com [--confirmed-at 1700000000] [--db list.db]
"""
from __future__ import annotations

import argparse
import sys

from mailinglist.core.config import get_settings, sqlite_url
from mailinglist.db.session import build_engine
from mailinglist.domain.subscribers import SubscriberEntry, is_valid_email, normalize_email
from mailinglist.repositories.subscriber_repository import SubscriberRepository


def main() -> None:
    ap = argparse.ArgumentParser(description="Register a subscriber")
    ap.add_argument("--email", required=True, help="Email address")
    ap.add_argument("--confirmed-at", type=int, help="Confirmation time (seconds since epoch)")
    ap.add_argument("--db", help="SQLite file (default: MAILINGLIST_DB / DATABASE_URL)")
    args = ap.parse_args()

    email = normalize_email(args.email)
    if not is_valid_email(email):
        raise SystemExit("Invalid email address")

    url = sqlite_url(args.db) if args.db else get_settings().database_url
    repo = SubscriberRepository(build_engine(url))
    repo.initialize()
    if repo.get(email):
        raise SystemExit(f"Email '{email}' already registered")

    entry = repo.create(email)
    if args.confirmed_at is not None:
        entry = repo.upsert(SubscriberEntry(email=email, confirmed_at=args.confirmed_at, opt_out=False))
    print("OK: subscriber registered")
    print(f"  ID: {entry.id}")
    print(f"  Email: {entry.email}")
    if entry.confirmed_at is not None:
        print(f"  Confirmed at: {entry.confirmed_at}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
