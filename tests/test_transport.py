import asyncio
import json

import httpx
import pytest
import requests

from inliner.errors import DecodeError, TransportError
from inliner.transport.api import decode_json
from inliner.transport.async_http import HttpxAsyncTransport
from inliner.transport.http import RequestsTransport


def fake_response(status, body=b""):
    response = requests.models.Response()
    response.status_code = status
    response._content = body
    return response


def test_requests_transport_passes_timeout_and_body(monkeypatch):
    seen = {}

    def fake_request(self, method, url, **kwargs):
        seen.update(kwargs, method=method, url=url)
        return fake_response(200, b'{"ok": true}')

    monkeypatch.setattr(requests.Session, "request", fake_request)
    transport = RequestsTransport(timeout=12.5)

    response = transport.request("POST", "https://api.test/x", json_body={"a": 1})

    assert response.status == 200
    assert json.loads(response.body) == {"ok": True}
    assert seen["timeout"] == 12.5
    assert seen["json"] == {"a": 1}


def test_requests_transport_uses_server_message(monkeypatch):
    monkeypatch.setattr(
        requests.Session,
        "request",
        lambda self, method, url, **kwargs: fake_response(422, b'{"message": "Bad prompt"}'),
    )
    with pytest.raises(TransportError) as excinfo:
        RequestsTransport().request("POST", "https://api.test/content/generate")
    assert str(excinfo.value) == "Inliner API error: Bad prompt"
    assert excinfo.value.status_code == 422


def test_requests_transport_without_raise_returns_status(monkeypatch):
    monkeypatch.setattr(
        requests.Session, "request", lambda self, method, url, **kwargs: fake_response(404, b"missing")
    )
    response = RequestsTransport().request("GET", "https://img.test/a.png", raise_for_status=False)
    assert response.status == 404


def test_requests_transport_wraps_network_errors(monkeypatch):
    def boom(self, method, url, **kwargs):
        raise requests.exceptions.ConnectionError("connection refused")

    monkeypatch.setattr(requests.Session, "request", boom)
    with pytest.raises(TransportError) as excinfo:
        RequestsTransport().request("GET", "https://api.test/x")
    assert excinfo.value.status_code is None
    assert "connection refused" in str(excinfo.value)


def test_httpx_transport_error_and_success():
    def handler(request):
        if request.url.path == "/fail":
            return httpx.Response(500, json={"message": "Server exploded"})
        return httpx.Response(200, content=b"image-bytes")

    async def scenario():
        transport = HttpxAsyncTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        ok = await transport.request("GET", "https://img.test/ok.png")
        with pytest.raises(TransportError, match="Server exploded") as excinfo:
            await transport.request("GET", "https://api.test/fail")
        await transport.aclose()
        return ok, excinfo.value

    ok, error = asyncio.run(scenario())
    assert ok.body == b"image-bytes"
    assert error.status_code == 500


def test_decode_json():
    assert decode_json(b"") == {}
    assert decode_json(b"null") == {}
    assert decode_json(b'{"a": 1}') == {"a": 1}
    with pytest.raises(DecodeError):
        decode_json(b"<html>")
