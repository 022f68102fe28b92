"""
Errors raised while serving a quotation request.

Each error carries the message that is logged and echoed to the client.
"""


class QuotationError(Exception):
    """Base class for failures of a quotation request."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamTimeoutError(QuotationError):
    """The upstream call did not complete before its deadline."""


class UpstreamRequestError(QuotationError):
    """The upstream call failed for any reason other than its deadline."""


class QuotationDecodeError(QuotationError):
    """The upstream body is not a quotation."""


class PersistenceError(QuotationError):
    """The quotation could not be stored."""


class ResponseEncodeError(QuotationError):
    """The response body could not be built."""


class StoreError(Exception):
    """A statement against the quotation store failed."""


class StoreTimeoutError(StoreError):
    """A statement against the quotation store ran past its deadline."""
