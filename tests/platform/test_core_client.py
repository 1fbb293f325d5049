"""Tests for the Platform Core HTTP client adapter."""

import io
import json
from urllib import error

import pytest

from audit_platform.config import ConsolidationSettings
from audit_platform.core_client import (
    CoreClient,
    CoreClientConflictError,
    CoreClientError,
    CoreClientHTTPError,
)
from contracts.v1.schemas import AnalyzerOutputContract, ConsolidateRequest
from core.report import assemble_report


class _FakeHTTPResponse:
    """Stands in for the context manager returned by ``urlopen``."""

    def __init__(self, body: dict | str):
        text = body if isinstance(body, str) else json.dumps(body)
        self._raw = text.encode("utf-8")

    def read(self):
        return self._raw

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


def _response_payload() -> dict:
    return {
        "report": assemble_report([], context_type="GENERAL").to_dict(),
        "errors": [],
        "meta": {"engine_version": "1.0.0", "timings": {"total_seconds": 0.001}},
    }


def test_health_success(monkeypatch):
    client = CoreClient(base_url="http://core.local")
    monkeypatch.setattr(
        "urllib.request.urlopen",
        lambda req, timeout=0: _FakeHTTPResponse({"status": "ok"}),
    )

    assert client.health() == {"status": "ok"}


def test_consolidate_posts_request_and_parses_contract(monkeypatch):
    client = CoreClient(base_url="http://core.local/")
    captured = {}

    def _fake_urlopen(req, timeout=0):
        captured["url"] = req.full_url
        captured["method"] = req.get_method()
        captured["body"] = json.loads(req.data.decode("utf-8"))
        return _FakeHTTPResponse(_response_payload())

    monkeypatch.setattr("urllib.request.urlopen", _fake_urlopen)
    req = ConsolidateRequest(analyzer_outputs=[AnalyzerOutputContract(source="A", records=[{"title": "t"}])])

    res = client.consolidate(req)

    assert captured["url"] == "http://core.local/v1/consolidate"
    assert captured["method"] == "POST"
    assert captured["body"]["analyzer_outputs"][0]["source"] == "A"
    assert res.meta.engine_version == "1.0.0"
    assert res.report.context_type == "GENERAL"


def test_duplicate_identity_maps_to_conflict_error(monkeypatch):
    client = CoreClient(base_url="http://core.local")

    def _raise_http(*args, **kwargs):
        raise error.HTTPError(
            url="http://core.local/v1/consolidate",
            code=409,
            msg="Conflict",
            hdrs=None,
            fp=io.BytesIO(b'{"detail": "Duplicate finding identity"}'),
        )

    monkeypatch.setattr("urllib.request.urlopen", _raise_http)

    with pytest.raises(CoreClientConflictError) as exc_info:
        client.consolidate(ConsolidateRequest())

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Duplicate finding identity"


def test_server_error_is_retried_then_succeeds(monkeypatch):
    client = CoreClient(base_url="http://core.local", retry_attempts=2, retry_backoff_seconds=0)
    calls = {"count": 0}

    def _flaky(req, timeout=0):
        calls["count"] += 1
        if calls["count"] == 1:
            raise error.HTTPError(req.full_url, 503, "Unavailable", None, io.BytesIO(b""))
        return _FakeHTTPResponse(_response_payload())

    monkeypatch.setattr("urllib.request.urlopen", _flaky)

    res = client.consolidate(ConsolidateRequest())

    assert calls["count"] == 2
    assert res.report.totals["findings"] == 0


def test_network_error_after_retries_maps_to_core_error(monkeypatch):
    client = CoreClient(base_url="http://core.local", retry_attempts=2, retry_backoff_seconds=0)
    calls = {"count": 0}

    def _raise_url_error(*args, **kwargs):
        calls["count"] += 1
        raise error.URLError("connection refused")

    monkeypatch.setattr("urllib.request.urlopen", _raise_url_error)

    with pytest.raises(CoreClientError, match="failed after retries"):
        client.health()
    assert calls["count"] == 2


def test_invalid_json_response_maps_to_core_error(monkeypatch):
    client = CoreClient(base_url="http://core.local")
    monkeypatch.setattr(
        "urllib.request.urlopen",
        lambda req, timeout=0: _FakeHTTPResponse("not json"),
    )

    with pytest.raises(CoreClientError, match="invalid JSON"):
        client.health()


def test_client_error_is_not_retried(monkeypatch):
    client = CoreClient(base_url="http://core.local", retry_attempts=3, retry_backoff_seconds=0)
    calls = {"count": 0}

    def _raise_http(req, timeout=0):
        calls["count"] += 1
        raise error.HTTPError(req.full_url, 400, "Bad Request", None, io.BytesIO(b"plain text"))

    monkeypatch.setattr("urllib.request.urlopen", _raise_http)

    with pytest.raises(CoreClientHTTPError) as exc_info:
        client.consolidate(ConsolidateRequest())

    assert calls["count"] == 1
    assert exc_info.value.detail == "plain text"
    assert not isinstance(exc_info.value, CoreClientConflictError)


def test_from_settings():
    assert CoreClient.from_settings(ConsolidationSettings()) is None
    client = CoreClient.from_settings(ConsolidationSettings(core_url="http://core.local/"))
    assert client.base_url == "http://core.local"


@pytest.mark.parametrize("status", [500, 502, 503, 504])
def test_every_server_error_is_retried(monkeypatch, status):
    client = CoreClient(base_url="http://core.local", retry_attempts=2, retry_backoff_seconds=0)
    calls = {"count": 0}

    def _flaky(req, timeout=0):
        calls["count"] += 1
        if calls["count"] == 1:
            raise error.HTTPError(req.full_url, status, "Server Error", None, io.BytesIO(b""))
        return _FakeHTTPResponse({"status": "ok"})

    monkeypatch.setattr("urllib.request.urlopen", _flaky)

    assert client.health() == {"status": "ok"}
    assert calls["count"] == 2
