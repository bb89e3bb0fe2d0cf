#!/usr/bin/env python3
"""
Exercise a running mailing-list gRPC server: create, confirm, opt out, list.

Usage:
  python scripts/rpc_demo.py [--addr localhost:8001] [--email 9999@999.com] [--timeout 1.0]
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

import grpc

from mailinglist.core.config import get_settings
from mailinglist.core.logging_config import configure_logging
from mailinglist.rpc.client import DEFAULT_TIMEOUT, MailingListClient

logger = logging.getLogger("rpc_demo")


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="gRPC client smoke run")
    ap.add_argument("--addr", default=settings.grpc_addr, help="Server address (env MAILINGLIST_GRPC_ADDR)")
    ap.add_argument("--email", default="9999@999.com", help="Address to create and opt out")
    ap.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Per-call deadline in seconds")
    args = ap.parse_args()
    configure_logging(settings.log_level)

    with MailingListClient(args.addr, timeout=args.timeout) as client:
        logger.info("Creating email %s", args.email)
        try:
            entry = client.create_email(args.email)
        except grpc.RpcError as exc:
            if exc.code() != grpc.StatusCode.ALREADY_EXISTS:
                raise
            entry = client.get_email(args.email)
        logger.info("Entry: %s", entry)

        logger.info("Updating email %s", args.email)
        entry = client.update_email(replace(entry, confirmed_at=10000))
        logger.info("Entry: %s", entry)

        logger.info("Deleting email %s", args.email)
        logger.info("Entry: %s", client.delete_email(args.email))

        entries = client.get_email_batch(1, 10)
        for i, item in enumerate(entries, start=1):
            logger.info(" item [%s of %s]: %s", i, len(entries), item)


if __name__ == "__main__":
    try:
        main()
    except grpc.RpcError as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc.code().name}: {exc.details()}\n")
        raise SystemExit(1)
