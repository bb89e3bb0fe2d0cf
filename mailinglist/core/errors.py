"""Error kinds raised by the subscriber store and the service layer."""


class MailingListError(Exception):
    """Base class for every error raised by the registry."""


class FatalSchemaError(MailingListError):
    """The subscriber table could not be created; startup must stop."""


class StorageError(MailingListError):
    """Opaque failure of the underlying database."""


class DuplicateEmailError(MailingListError):
    """A subscriber with the same email already exists."""

    def __init__(self, email: str):
        super().__init__(f"email already exists: {email}")
        self.email = email


class InvalidArgumentError(MailingListError):
    """Caller supplied input that fails validation."""
