"""Tests for the HTTP client implementations."""

from __future__ import annotations

import io
import json
import urllib.error
from email.message import Message
from unittest.mock import MagicMock, patch

from gitflow.core.result import Err, Ok
from gitflow.provider.http import HttpClient, HttpError, MockHttpClient, RealHttpClient

URL = "https://api.example.com/repos/o/r"


def _response(body: bytes) -> MagicMock:
    response = MagicMock()
    response.read.return_value = body
    response.__enter__.return_value = response
    return response


class TestMockHttpClient:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)
        assert isinstance(RealHttpClient(), HttpClient)

    def test_unknown_request_is_404(self) -> None:
        result = MockHttpClient().request_json("GET", URL, {})
        assert isinstance(result, Err)
        assert result.error.status == 404

    def test_records_calls(self) -> None:
        client = MockHttpClient()
        client.set_json("post", URL, {"ok": True})
        result = client.request_json("POST", URL, {"X": "1"}, {"a": 1})
        assert result == Ok({"ok": True})
        assert client.calls == [("POST", URL, {"a": 1})]
        assert client.headers == [{"X": "1"}]

    def test_error_response(self) -> None:
        client = MockHttpClient()
        client.set_json("GET", URL, HttpError(url=URL, status=500, message="boom"))
        result = client.request_json("GET", URL, {})
        assert result == Err(HttpError(url=URL, status=500, message="boom"))


class TestRealHttpClient:
    def test_decodes_json(self) -> None:
        with patch("urllib.request.urlopen", return_value=_response(b'{"a": 1}')) as urlopen:
            result = RealHttpClient().request_json("POST", URL, {"X": "1"}, {"b": 2})

        assert result == Ok({"a": 1})
        request = urlopen.call_args.args[0]
        assert request.get_method() == "POST"
        assert json.loads(request.data) == {"b": 2}
        assert request.get_header("Content-type") == "application/json"
        assert request.get_header("X") == "1"
        assert urlopen.call_args.kwargs["timeout"] == 20.0

    def test_empty_body_is_none(self) -> None:
        with patch("urllib.request.urlopen", return_value=_response(b"  ")):
            assert RealHttpClient().request_json("GET", URL, {}) == Ok(None)

    def test_bad_json(self) -> None:
        with patch("urllib.request.urlopen", return_value=_response(b"<html>")):
            result = RealHttpClient().request_json("GET", URL, {})
        assert isinstance(result, Err)
        assert result.error.status == 0
        assert result.error.message.startswith("JSON parse error")

    def test_http_error_body(self) -> None:
        error = urllib.error.HTTPError(
            URL, 422, "Unprocessable", Message(), io.BytesIO(b'{"message":"already_exists"}')
        )
        with patch("urllib.request.urlopen", side_effect=error):
            result = RealHttpClient().request_json("POST", URL, {})
        assert isinstance(result, Err)
        assert result.error.status == 422
        assert "already_exists" in result.error.message

    def test_network_error(self) -> None:
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("refused")):
            result = RealHttpClient().request_json("GET", URL, {})
        assert isinstance(result, Err)
        assert result.error.status == 0
        assert result.error.message == "refused"
