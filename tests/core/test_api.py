"""Integration tests for the stateless core FastAPI endpoints."""

from fastapi.testclient import TestClient

import core.api as core_api


def _payload(**overrides):
    payload = {
        "analyzer_outputs": [
            {
                "source": "A",
                "records": [{"id": "1", "title": "SQLi", "location": "db.py:10", "severity": "HIGH",
                             "category": "security"}],
            },
            {
                "source": "B",
                "records": [{"id": "4", "title": "SQL injection", "location": "db.py:10",
                             "category": "security"}],
            },
        ],
        "context": {"type": "SAAS"},
    }
    payload.update(overrides)
    return payload


def test_health_returns_ok():
    client = TestClient(core_api.app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_consolidate_v1_returns_report():
    client = TestClient(core_api.app)

    response = client.post("/v1/consolidate", json=_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["report"]["summary"]["CRITICAL_PRIORITY"] == 1
    assert body["report"]["agreement_matrix"]["sources"] == ["A", "B"]
    assert body["meta"]["engine_version"] == core_api.CORE_VERSION


def test_consolidate_v1_reports_malformed_records_without_failing():
    client = TestClient(core_api.app)

    response = client.post(
        "/v1/consolidate",
        json=_payload(analyzer_outputs=[{"source": "A", "records": [{"id": "1"}, 42]}]),
    )

    assert response.status_code == 200
    assert [e["index"] for e in response.json()["errors"]] == [0, 1]


def test_consolidate_v1_duplicate_identity_is_conflict():
    client = TestClient(core_api.app)
    records = [{"id": "1", "title": "a"}, {"id": "1", "title": "b"}]

    response = client.post("/v1/consolidate", json=_payload(analyzer_outputs=[{"source": "A", "records": records}]))

    assert response.status_code == 409
    assert "Duplicate finding identity" in response.json()["detail"]


def test_consolidate_v1_rejects_unknown_fields():
    client = TestClient(core_api.app)
    response = client.post("/v1/consolidate", json=_payload(extra_field=True))
    assert response.status_code == 422


def test_consolidate_v1_maps_value_error_to_400(monkeypatch):
    def _boom(request):
        raise ValueError("bad input")

    monkeypatch.setattr(core_api.core_service, "consolidate", _boom)
    client = TestClient(core_api.app)

    response = client.post("/v1/consolidate", json=_payload())

    assert response.status_code == 400
    assert response.json()["detail"] == "bad input"
