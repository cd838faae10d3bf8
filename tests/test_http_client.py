from __future__ import annotations

from typing import Any

import pytest
import requests

from betarank.data.http_client import JsonHttpClient
from betarank.errors import ProviderNetworkError, ProviderResponseError


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, responses: list[FakeResponse | Exception]) -> None:
        self.responses = list(responses)
        self.headers: dict[str, str] = {}
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, params: Any = None, timeout: float | None = None) -> FakeResponse:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("betarank.data.http_client.sleep", lambda _seconds: None)


def _client(session: FakeSession, max_retries: int = 3) -> JsonHttpClient:
    return JsonHttpClient(
        base_url="https://example.test/api/",
        provider_name="Example",
        timeout=7.5,
        max_retries=max_retries,
        headers={"X-Key": "abc"},
        session=session,  # type: ignore[arg-type]
    )


def test_get_json_returns_payload_and_passes_timeout() -> None:
    session = FakeSession([FakeResponse(200, {"ok": True})])

    payload = _client(session).get_json("/ping", params={"a": "1"})

    assert payload == {"ok": True}
    assert session.calls[0]["url"] == "https://example.test/api/ping"
    assert session.calls[0]["timeout"] == 7.5
    assert session.headers["X-Key"] == "abc"


def test_retries_rate_limit_and_server_errors() -> None:
    session = FakeSession(
        [
            FakeResponse(429),
            requests.ConnectionError("reset"),
            FakeResponse(200, [1, 2, 3]),
        ]
    )

    assert _client(session).get_json("/data") == [1, 2, 3]
    assert len(session.calls) == 3


def test_exhausted_transport_retries_raise_network_error() -> None:
    session = FakeSession([requests.Timeout("slow")] * 2)

    with pytest.raises(ProviderNetworkError, match="Example request failed"):
        _client(session, max_retries=2).get_json("/data")


def test_persistent_server_error_raises_network_error() -> None:
    session = FakeSession([FakeResponse(503)] * 3)

    with pytest.raises(ProviderNetworkError, match="server error: 503"):
        _client(session).get_json("/data")


def test_client_error_is_not_retried() -> None:
    session = FakeSession([FakeResponse(400, text='{"code":-1121,"msg":"Invalid symbol."}')])

    with pytest.raises(ProviderResponseError, match="Invalid symbol"):
        _client(session).get_json("/data")
    assert len(session.calls) == 1


def test_non_json_body_is_a_response_error() -> None:
    session = FakeSession([FakeResponse(200, ValueError("bad json"))])

    with pytest.raises(ProviderResponseError, match="non-JSON"):
        _client(session).get_json("/data")
