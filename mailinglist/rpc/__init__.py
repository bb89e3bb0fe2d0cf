"""
gRPC transport.

Both the server and the client speak the same unary methods of the
``mailinglist.MailingListService`` service, with JSON-encoded messages, and
share the subscriber service with the JSON API.
"""

SERVICE_NAME = "mailinglist.MailingListService"

METHODS = (
    "CreateEmail",
    "GetEmail",
    "UpdateEmail",
    "DeleteEmail",
    "GetEmailBatch",
)
