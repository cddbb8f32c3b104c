# storefront/core/errors.py


class StorefrontError(Exception):
    """Base class for errors raised by the catalog core."""


class RowParseError(StorefrontError):
    """A single sheet row could not be turned into a variant record.

    Always handled per row; it never aborts a batch.
    """

    def __init__(self, message: str, line: int = None):
        super().__init__(message)
        self.line = line


class RemoteFetchError(StorefrontError):
    """The spreadsheet API could not be reached or refused the request.

    Fatal to the current request or sync pass and propagated to the caller,
    who may retry on the next request.
    """


class SheetNotConfiguredError(RemoteFetchError):
    """The sheet id or service account credentials are missing."""


class PersistenceError(StorefrontError):
    """A product or variant write to the relational store failed."""

    def __init__(self, message: str, entity: str = None):
        super().__init__(message)
        self.entity = entity
