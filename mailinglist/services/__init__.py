"""
Use cases shared by the JSON and gRPC transports.

Transports call the subscriber service instead of the repository so that
input validation happens once, before any storage access.
"""
