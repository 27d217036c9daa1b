from __future__ import annotations

import asyncio
import gzip
import zlib
from typing import Optional
from urllib.parse import urlparse

import requests
from requests.auth import HTTPBasicAuth
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers
from urllib3.exceptions import HTTPError as TransportError

from compat_scanner.config import DEFAULT_CHARSET, DEFAULT_HEADERS, REQUEST_TIMEOUT
from compat_scanner.errors import (
    EmptyBodyError,
    FetchError,
    HttpError,
    NetworkError,
    UnknownEncodingError,
)


class FetchResult:
    def __init__(self, url: str, status_code: int, headers, body: str, compression: str = "none"):
        self.url = url
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self.body = body
        self.compression = compression
        parsed = urlparse(url)
        self.scheme = parsed.scheme
        self.domain = parsed.netloc


def decompress(body: bytes, encoding: Optional[str]) -> tuple[bytes, str]:
    """Undo a content-encoding. Returns the plain bytes and the compression name."""
    encoding = (encoding or "").strip().lower()
    if encoding in ("", "identity"):
        return body, "none"

    if encoding in ("gzip", "x-gzip"):
        try:
            return gzip.decompress(body), "gzip"
        except (OSError, EOFError, zlib.error) as e:
            raise FetchError(f"Error found: can't gunzip content {e}")

    if encoding == "deflate":
        # Servers disagree on whether deflate carries the zlib header
        try:
            return zlib.decompress(body), "deflate"
        except zlib.error:
            pass
        try:
            return zlib.decompress(body, -zlib.MAX_WBITS), "deflate"
        except zlib.error as e:
            raise FetchError(f"Error found: can't deflate content {e}")

    raise UnknownEncodingError(f"Unknown content encoding: {encoding}")


def decode_body(body: bytes, headers) -> str:
    charset = DEFAULT_CHARSET
    if "charset=" in headers.get("content-type", "").lower():
        charset = get_encoding_from_headers(headers) or DEFAULT_CHARSET
    try:
        return body.decode(charset, errors="replace")
    except LookupError:
        return body.decode(DEFAULT_CHARSET, errors="replace")


class ChallengeBasicAuth(HTTPBasicAuth):
    """Basic credentials that are only sent once the server asks for them.

    The first request goes out bare; a 401 carrying a Basic challenge is
    answered once with an Authorization header.
    """

    def handle_401(self, r, **kwargs):
        challenge = r.headers.get("www-authenticate", "")
        if r.status_code != 401 or "basic" not in challenge.lower():
            return r
        if "Authorization" in r.request.headers:
            # Already answered; the credentials were refused
            return r

        # Release the connection so the retry can reuse it
        r.content
        r.close()
        prep = r.request.copy()
        super().__call__(prep)
        _r = r.connection.send(prep, **kwargs)
        _r.history.append(r)
        _r.request = prep
        return _r

    def __call__(self, r):
        r.register_hook("response", self.handle_401)
        return r


class Fetcher:
    """HTTP client bound to one scan: credentials, proxy settings and headers
    are captured once and reused by every nested request."""

    def __init__(
        self,
        auth: Optional[tuple[str, str]] = None,
        timeout: int = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.auth = auth
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        if auth:
            self.session.auth = ChallengeBasicAuth(*auth)

    def get(self, url: str, headers: Optional[dict] = None) -> FetchResult:
        try:
            resp = self.session.get(
                url, headers=headers, timeout=self.timeout, allow_redirects=True, stream=True
            )
        except requests.RequestException as e:
            raise NetworkError(f"Error found: {e}", url=url)

        try:
            if not 200 <= resp.status_code < 300:
                raise HttpError(
                    f"Error found: HTTP {resp.status_code}", url=resp.url, status_code=resp.status_code
                )
            # Read the wire bytes so the compression actually used stays observable
            raw = resp.raw.read(decode_content=False)
        except (requests.RequestException, TransportError) as e:
            raise NetworkError(f"Error found: {e}", url=url)
        finally:
            resp.close()

        if not raw:
            raise EmptyBodyError("Error found: Empty body", url=resp.url, status_code=resp.status_code)

        body, compression = decompress(raw, resp.headers.get("content-encoding"))
        if not body:
            # A compressed stream can still carry nothing
            raise EmptyBodyError("Error found: Empty body", url=resp.url, status_code=resp.status_code)
        return FetchResult(
            url=resp.url,
            status_code=resp.status_code,
            headers=resp.headers,
            body=decode_body(body, resp.headers),
            compression=compression,
        )

    async def fetch(self, url: str, headers: Optional[dict] = None) -> FetchResult:
        return await asyncio.to_thread(self.get, url, headers)

    def close(self) -> None:
        self.session.close()
