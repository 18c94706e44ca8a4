"""Tests for shared HTTP helpers."""

from unittest.mock import Mock

import pytest
import requests

from castlog.utils.errors import NetworkError, UpstreamError
from castlog.utils.http import USER_AGENT, classify_http_error, fetch, fetch_json


def _response(status_code: int = 200, json_data=None, reason: str = "OK") -> Mock:
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


class TestClassifyHTTPError:
    """Tests for classify_http_error function."""

    @pytest.mark.parametrize(
        "status,fragment",
        [
            (429, "Rate limit exceeded"),
            (503, "Server error"),
            (401, "Authentication failed"),
            (403, "Authentication failed"),
            (404, "Invalid request"),
            (302, "Request failed"),
        ],
    )
    def test_messages(self, status, fragment):
        error = classify_http_error(status, "reason")
        assert isinstance(error, UpstreamError)
        assert error.status_code == status
        assert fragment in str(error)


class TestFetch:
    """Tests for fetch and fetch_json functions."""

    def test_sends_user_agent_and_headers(self):
        session = Mock()
        session.get.return_value = _response()

        fetch("https://example.com/x", headers={"Accept": "application/json"}, session=session)

        _, kwargs = session.get.call_args
        assert kwargs["headers"]["User-Agent"] == USER_AGENT
        assert kwargs["headers"]["Accept"] == "application/json"
        assert kwargs["timeout"] == 30

    def test_non_200_raises_upstream_error(self):
        session = Mock()
        session.get.return_value = _response(status_code=500, reason="Internal Server Error")

        with pytest.raises(UpstreamError) as exc:
            fetch("https://example.com/x", session=session)
        assert exc.value.status_code == 500

    def test_request_exception_wrapped(self):
        session = Mock()
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(NetworkError, match="refused"):
            fetch("https://example.com/x", session=session)

    def test_fetch_json_decodes(self):
        session = Mock()
        session.get.return_value = _response(json_data={"latest": {}})
        assert fetch_json("https://example.com/x", session=session) == {"latest": {}}

    def test_fetch_json_invalid_body(self):
        session = Mock()
        session.get.return_value = _response(json_data=ValueError("Expecting value"))
        with pytest.raises(NetworkError, match="Invalid JSON"):
            fetch_json("https://example.com/x", session=session)
