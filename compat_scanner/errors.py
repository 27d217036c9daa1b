"""Exception taxonomy shared by the fetch, parse and analysis stages."""

from __future__ import annotations

from typing import Optional


class ScannerError(Exception):
    pass


class FetchError(ScannerError):
    """Retrieving a URL failed. ``status_code`` is the origin status when one was received."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class NetworkError(FetchError):
    pass


class HttpError(FetchError):
    pass


class EmptyBodyError(FetchError):
    pass


class UnknownEncodingError(FetchError):
    pass


class ParseError(ScannerError):
    pass


class MalformedPackageError(ScannerError):
    pass


class CheckExecutionError(ScannerError):
    def __init__(self, test_name: str, cause: BaseException):
        super().__init__(f"Check '{test_name}' failed: {cause!r}")
        self.test_name = test_name
        self.cause = cause
