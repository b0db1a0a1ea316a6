# -*- coding: utf-8 -*-
"""
Tests for the HTTP submit collaborator.

The network is never touched: ``requests.request`` is patched.
"""

import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest
import requests

from services.exceptions import TerminalSubmissionError, TransientSubmissionError
from services.http_submitter import HttpSubmitter, is_retryable_status, to_json_value

URL = "https://forms.example.org/api/v1/signups"


def make_response(status_code, body=None, text=None):
    response = requests.Response()
    response.status_code = status_code
    response.url = URL
    response.encoding = "utf-8"
    if text is not None:
        response._content = text.encode("utf-8")
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = b""
    return response


@pytest.fixture
def submitter():
    return HttpSubmitter(URL, timeout=5, headers={"Authorization": "Bearer token"})


class TestJsonConversion:
    """Test value conversion."""

    def test_converts_nested_values(self):
        class Upload:
            name = "passport.pdf"

        converted = to_json_value({
            "born": date(1990, 5, 17),
            "amount": Decimal("12.50"),
            "path": Path("a") / "b.txt",
            "tags": ("x", "y"),
            "file": Upload(),
        })

        assert converted == {
            "born": "1990-05-17",
            "amount": "12.50",
            "path": str(Path("a") / "b.txt"),
            "tags": ["x", "y"],
            "file": "passport.pdf",
        }

    @pytest.mark.parametrize("status, retryable", [
        (408, True), (429, True), (500, True), (503, True), (599, True),
        (400, False), (401, False), (409, False), (422, False),
    ])
    def test_status_classification(self, status, retryable):
        assert is_retryable_status(status) is retryable


class TestHttpSubmitter:
    """Test request building and failure classification."""

    @pytest.mark.asyncio
    async def test_posts_json_and_returns_payload(self, submitter):
        with patch("services.http_submitter.requests.request",
                   return_value=make_response(201, {"id": "FRM-1"})) as request:
            payload = await submitter({"name": "Ada", "born": date(1990, 1, 2)})

        assert payload == {"id": "FRM-1"}
        kwargs = request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == URL
        assert kwargs["json"] == {"name": "Ada", "born": "1990-01-02"}
        assert kwargs["timeout"] == 5
        assert kwargs["headers"]["Authorization"] == "Bearer token"
        assert kwargs["headers"]["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_empty_body(self, submitter):
        with patch("services.http_submitter.requests.request", return_value=make_response(204)):
            assert await submitter({}) == {}

    @pytest.mark.asyncio
    async def test_non_json_body(self, submitter):
        with patch("services.http_submitter.requests.request",
                   return_value=make_response(200, text="thanks")):
            assert await submitter({}) == {"raw": "thanks"}

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self, submitter):
        with patch("services.http_submitter.requests.request",
                   return_value=make_response(503, {"title": "Maintenance"})):
            with pytest.raises(TransientSubmissionError) as exc_info:
                await submitter({})

        assert exc_info.value.status_code == 503
        assert exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_client_error_is_terminal(self, submitter):
        body = {"errors": {"email": ["already registered"]}}
        with patch("services.http_submitter.requests.request",
                   return_value=make_response(409, body)):
            with pytest.raises(TerminalSubmissionError) as exc_info:
                await submitter({})

        assert exc_info.value.status_code == 409
        assert exc_info.value.response_data == body
        assert not exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_timeout_is_transient(self, submitter):
        with patch("services.http_submitter.requests.request",
                   side_effect=requests.exceptions.ReadTimeout("read timed out")):
            with pytest.raises(TransientSubmissionError) as exc_info:
                await submitter({})

        assert isinstance(exc_info.value.original_error, requests.exceptions.Timeout)

    @pytest.mark.asyncio
    async def test_connection_error_is_transient(self, submitter):
        with patch("services.http_submitter.requests.request",
                   side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(TransientSubmissionError):
                await submitter({})
