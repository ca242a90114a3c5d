"""
Exception hierarchy for sheetstream

Every error raised while scanning a sheet derives from SheetStreamError,
so hosts can catch a single base class. None of these are retried.
"""

from typing import Optional


class SheetStreamError(Exception):
    """Base class for all sheetstream errors"""


class ConfigurationError(SheetStreamError):
    """A required option is missing or a configured value is invalid"""


class FetchError(SheetStreamError):
    """The remote document could not be turned into a row buffer"""


class TransportError(FetchError):
    """The HTTP request could not be completed"""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {message}")


class InvalidEnvelopeError(FetchError):
    """The response body does not start with the expected guard prefix"""

    def __init__(self, message: str = "invalid response: missing envelope prefix"):
        super().__init__(message)


class MalformedJsonError(FetchError):
    """The response body is not valid JSON once the prefix is stripped"""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid JSON in response: {detail}")


class MissingRowsError(FetchError):
    """The parsed document has no array at table.rows"""

    def __init__(self, message: str = "cannot get rows from response"):
        super().__init__(message)


class UnsupportedColumnTypeError(SheetStreamError):
    """A declared column type cannot be produced from sheet cells"""

    def __init__(self, column_name: str, data_type=None):
        self.column_name = column_name
        self.data_type = data_type
        super().__init__(f"column {column_name} data type is not supported")


class UnsupportedOperationError(SheetStreamError):
    """The adapter does not implement this operation"""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        super().__init__(message or f"{operation} on spreadsheet source is not supported")
