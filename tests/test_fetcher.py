import gzip
import zlib
from unittest.mock import MagicMock

import pytest
import requests
from requests.auth import HTTPBasicAuth
from requests.structures import CaseInsensitiveDict

from compat_scanner.errors import (
    EmptyBodyError,
    FetchError,
    HttpError,
    NetworkError,
    UnknownEncodingError,
)
from compat_scanner.fetcher import ChallengeBasicAuth, Fetcher, decode_body, decompress

HTML = "<!doctype html><html><body><p>héllo ☃</p></body></html>"


def _response(body: bytes, status=200, headers=None, url="http://test/"):
    resp = MagicMock()
    resp.status_code = status
    resp.url = url
    resp.headers = CaseInsensitiveDict(headers or {"content-type": "text/html"})
    resp.raw.read.return_value = body
    return resp


def _fetcher(resp=None, side_effect=None, auth=None):
    session = MagicMock()
    session.headers = {}
    session.get.return_value = resp
    session.get.side_effect = side_effect
    return Fetcher(auth=auth, session=session), session


class TestFetcher:
    def test_plain_body(self):
        fetcher, session = _fetcher(_response(HTML.encode("utf-8")))

        result = fetcher.get("http://test/")

        assert result.body == HTML
        assert result.compression == "none"
        assert result.status_code == 200
        assert session.get.call_args.kwargs["allow_redirects"] is True

    def test_gzip_body(self):
        body = gzip.compress(HTML.encode("utf-8"))
        fetcher, _ = _fetcher(_response(body, headers={"content-encoding": "gzip"}))

        result = fetcher.get("http://test/")

        assert result.body == HTML
        assert result.compression == "gzip"

    def test_deflate_with_and_without_zlib_header(self):
        wrapped = zlib.compress(HTML.encode("utf-8"))
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        raw = compressor.compress(HTML.encode("utf-8")) + compressor.flush()

        for body in (wrapped, raw):
            fetcher, _ = _fetcher(_response(body, headers={"content-encoding": "deflate"}))
            result = fetcher.get("http://test/")
            assert result.body == HTML
            assert result.compression == "deflate"

    def test_unknown_encoding(self):
        fetcher, _ = _fetcher(_response(b"\x00\x01", headers={"content-encoding": "br"}))

        with pytest.raises(UnknownEncodingError):
            fetcher.get("http://test/")

    def test_corrupt_gzip(self):
        fetcher, _ = _fetcher(_response(b"not gzip at all", headers={"content-encoding": "gzip"}))

        with pytest.raises(FetchError):
            fetcher.get("http://test/")

    def test_empty_body_is_an_error(self):
        fetcher, _ = _fetcher(_response(b""))

        with pytest.raises(EmptyBodyError):
            fetcher.get("http://test/")

    def test_compressed_empty_body_is_an_error(self):
        fetcher, _ = _fetcher(_response(gzip.compress(b""), headers={"content-encoding": "gzip"}))

        with pytest.raises(EmptyBodyError):
            fetcher.get("http://test/")

    def test_non_2xx_raises_http_error(self):
        resp = _response(b"Not found", status=404)
        fetcher, _ = _fetcher(resp)

        with pytest.raises(HttpError) as excinfo:
            fetcher.get("http://test/missing")

        assert excinfo.value.status_code == 404
        resp.close.assert_called_once()

    @pytest.mark.parametrize("error", [requests.ConnectionError("refused"), requests.Timeout("slow")])
    def test_network_failures(self, error):
        fetcher, _ = _fetcher(side_effect=error)

        with pytest.raises(NetworkError):
            fetcher.get("http://test/")

    def test_reports_final_url_after_redirect(self):
        fetcher, _ = _fetcher(_response(HTML.encode(), url="http://test/moved/index.html"))

        result = fetcher.get("http://test/")

        assert result.url == "http://test/moved/index.html"

    def test_declared_charset_is_used(self):
        body = "café".encode("latin-1")
        fetcher, _ = _fetcher(_response(body, headers={"content-type": "text/html; charset=ISO-8859-1"}))

        assert fetcher.get("http://test/").body == "café"

    def test_credentials_are_bound_to_the_session(self):
        fetcher, session = _fetcher(_response(HTML.encode()), auth=("user", "secret"))

        assert isinstance(session.auth, ChallengeBasicAuth)
        assert session.auth.username == "user"
        assert fetcher.auth == ("user", "secret")

    def test_per_request_headers(self):
        fetcher, session = _fetcher(_response(HTML.encode()))

        fetcher.get("http://test/", headers={"User-Agent": "Other"})

        assert session.get.call_args.kwargs["headers"] == {"User-Agent": "Other"}

    @pytest.mark.asyncio
    async def test_fetch_runs_off_the_event_loop(self):
        fetcher, _ = _fetcher(_response(HTML.encode()))

        result = await fetcher.fetch("http://test/")

        assert result.body == HTML


class TestDecoding:
    def test_gzip_decode_round_trip(self):
        headers = CaseInsensitiveDict({"content-type": "text/css; charset=utf-8"})
        plain, compression = decompress(gzip.compress(HTML.encode("utf-8")), "gzip")

        text = decode_body(plain, headers)

        assert compression == "gzip"
        assert text == HTML
        assert decode_body(text.encode("utf-8"), headers) == text

    def test_identity_is_not_compression(self):
        assert decompress(b"abc", "identity") == (b"abc", "none")
        assert decompress(b"abc", None) == (b"abc", "none")

    def test_unknown_charset_falls_back_to_utf8(self):
        headers = CaseInsensitiveDict({"content-type": "text/html; charset=no-such-charset"})

        assert decode_body("ok".encode(), headers) == "ok"


class TestChallengeBasicAuth:
    def _request(self, auth):
        return auth(requests.Request("GET", "http://test/private").prepare())

    def _challenge(self, request, status=401, challenge='Basic realm="private"'):
        resp = MagicMock()
        resp.status_code = status
        resp.headers = CaseInsensitiveDict({"www-authenticate": challenge} if challenge else {})
        resp.request = request
        retry = MagicMock()
        retry.history = []
        resp.connection.send.return_value = retry
        return resp, retry

    def test_first_request_carries_no_credentials(self):
        request = self._request(ChallengeBasicAuth("user", "secret"))

        assert "Authorization" not in request.headers
        assert request.hooks["response"]

    def test_basic_challenge_is_answered_once(self):
        auth = ChallengeBasicAuth("user", "secret")
        resp, retry = self._challenge(self._request(auth))

        result = auth.handle_401(resp, timeout=5)

        assert result is retry
        sent = resp.connection.send.call_args.args[0]
        assert sent.headers["Authorization"] == "Basic dXNlcjpzZWNyZXQ="
        assert resp.connection.send.call_args.kwargs == {"timeout": 5}
        assert retry.history == [resp]
        assert "Authorization" not in resp.request.headers

    def test_refused_credentials_are_not_resent(self):
        auth = ChallengeBasicAuth("user", "secret")
        request = HTTPBasicAuth("user", "secret")(self._request(auth))
        resp, _ = self._challenge(request)

        assert auth.handle_401(resp) is resp
        resp.connection.send.assert_not_called()

    @pytest.mark.parametrize("status,challenge", [(200, None), (401, 'Digest realm="x"'), (401, None)])
    def test_other_responses_pass_through(self, status, challenge):
        auth = ChallengeBasicAuth("user", "secret")
        resp, _ = self._challenge(self._request(auth), status=status, challenge=challenge)

        assert auth.handle_401(resp) is resp
        resp.connection.send.assert_not_called()
