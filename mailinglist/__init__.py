"""Mailing-list subscriber registry served over JSON/HTTP and gRPC."""

__version__ = "0.1.0"
