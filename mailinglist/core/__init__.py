"""
Core utilities shared across the mailing-list service.

This package hosts configuration, logging setup and the error hierarchy used
by the repository, the services and both transports.
"""
