"""Errors raised by the transient retention services."""


class RetentionError(Exception):
    """Base class for retention failures."""


class RetentionStorageError(RetentionError):
    """
    Raised when the watermark store or the record store cannot be read or written.

    Carries the name of the resource that failed so callers can log it.
    """

    def __init__(self, resource: str, message: str):
        self.resource = resource
        super().__init__(f"{resource}: {message}")
