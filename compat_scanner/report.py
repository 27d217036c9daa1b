"""Turn scan outcomes into HTTP responses."""

from __future__ import annotations

from typing import Optional, Union

from fastapi.responses import JSONResponse, PlainTextResponse

from compat_scanner import __version__
from compat_scanner.models import RemoteError, ScanReport, ScanResponse, UrlInfo

NO_SNIFF = {"X-Content-Type-Options": "nosniff"}


def send_results(report: ScanReport) -> JSONResponse:
    body = ScanResponse(
        version=__version__,
        url=UrlInfo(uri=report.url),
        process_time=report.process_time,
        results=report.results,
    )
    return JSONResponse(
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=NO_SNIFF,
    )


def remote_error_response(status_code: Optional[Union[int, str]], message: str) -> JSONResponse:
    """The scanned site failed; that is still a successful answer from us."""
    body = RemoteError(status_code=status_code, message=message)
    return JSONResponse(content=body.model_dump(mode="json", by_alias=True), status_code=200)


def bad_request() -> PlainTextResponse:
    return PlainTextResponse("Your package is malformed\n", status_code=400)


def internal_server_error(error: BaseException) -> JSONResponse:
    return JSONResponse(
        content={"error": type(error).__name__, "message": str(error)},
        status_code=500,
    )
