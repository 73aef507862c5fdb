"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from api.index import app, get_config, get_store
from cupping_compass.config import AppConfig
from cupping_compass.storage import InMemoryEvaluationStore

HEADERS = {"X-User-Id": "user-1"}


def _cup_payload(aroma=8.5, defects=(0, 0)):
    return {
        "aroma": aroma,
        "scores": {
            "hot": {
                "flavor": 8.25,
                "aftertaste": 8.0,
                "acidity": 8.5,
                "body": 8.0,
                "balance": 8.25,
                "acidity_intensity": "high",
            }
        },
        "defects": {"cups_affected": defects[0], "intensity": defects[1]},
    }


def _payload(name="Ethiopia Yirgacheffe", cups=None):
    return {
        "coffee_name": name,
        "roast_level": "light",
        "water_temperature": "hot",
        "cups": cups if cups is not None else [_cup_payload(), _cup_payload(defects=(1, 2))],
        "notes": "Jasmine and bergamot",
    }


@pytest.fixture
def client():
    store = InMemoryEvaluationStore()
    config = AppConfig(language="en", narrative_provider="template", radar_size=240)
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_config] = lambda: config
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def created(client):
    response = client.post("/evaluations", json=_payload(), headers=HEADERS)
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_requests_require_user(client):
    """Evaluation routes need the X-User-Id header."""
    response = client.get("/evaluations")
    assert response.status_code == 401


def test_create_evaluation_scores_cups(created):
    """POST /evaluations should return the scored evaluation."""
    assert created["overall_score"] == 78.5
    assert [cup["total_score"] for cup in created["cups"]] == [79.5, 77.5]
    assert created["owner_id"] == "user-1"
    assert created["is_favorite"] is False


def test_create_rejects_duplicate_name(client, created):
    """Duplicate names for the same owner are a field error."""
    response = client.post("/evaluations", json=_payload(name="ethiopia yirgacheffe"), headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "coffee_name"


def test_create_rejects_invalid_slider(client):
    """Off-grid slider values are reported with their path."""
    response = client.post("/evaluations", json=_payload(cups=[_cup_payload(aroma=5.0)]), headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "cups[0].aroma"


def test_create_rejects_empty_cups(client):
    response = client.post("/evaluations", json=_payload(cups=[]), headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "cups"


def test_list_and_filters(client, created):
    """Listing should honor the favorites and search filters."""
    client.post("/evaluations", json=_payload(name="Kenya AA"), headers=HEADERS)

    assert len(client.get("/evaluations", headers=HEADERS).json()) == 2
    assert [item["coffee_name"] for item in client.get("/evaluations?q=kenya", headers=HEADERS).json()] == [
        "Kenya AA"
    ]

    favorite = client.post(f"/evaluations/{created['id']}/favorite", headers=HEADERS)
    assert favorite.json()["is_favorite"] is True
    favorites = client.get("/evaluations?favorites=true", headers=HEADERS).json()
    assert [item["id"] for item in favorites] == [created["id"]]


def test_other_owner_cannot_read(client, created):
    """Evaluations are scoped to their owner."""
    response = client.get(f"/evaluations/{created['id']}", headers={"X-User-Id": "user-2"})
    assert response.status_code == 404


def test_delete(client, created):
    assert client.delete(f"/evaluations/{created['id']}", headers=HEADERS).json() == {"ok": True}
    assert client.get(f"/evaluations/{created['id']}", headers=HEADERS).status_code == 404
    assert client.delete(f"/evaluations/{created['id']}", headers=HEADERS).status_code == 404


def test_report_json(client, created):
    """The report should use the configured language unless overridden."""
    report = client.get(f"/evaluations/{created['id']}/report.json", headers=HEADERS).json()
    spanish = client.get(f"/evaluations/{created['id']}/report.json?lang=es", headers=HEADERS).json()

    assert report["summary"]["overall_score"] == 78.5
    assert report["header"]["roast_level"] == "Light"
    assert spanish["header"]["roast_level"] == "Claro"
    assert report["cups"][0]["additional"]["acidity"]["intensity"] == "High"


def test_report_rejects_unknown_language(client, created):
    response = client.get(f"/evaluations/{created['id']}/report.json?lang=fr", headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "language"


def test_report_pdf(client, created):
    """The PDF is served as an attachment named after the coffee."""
    response = client.get(f"/evaluations/{created['id']}/report.pdf", headers=HEADERS)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "Ethiopia_Yirgacheffe_Evaluation.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_radar_png(client, created):
    """Radar charts can be drawn per evaluation, cup and phase."""
    overall = client.get(f"/evaluations/{created['id']}/radar.png", headers=HEADERS)
    single = client.get(f"/evaluations/{created['id']}/radar.png?cup=2&phase=hot", headers=HEADERS)

    assert overall.headers["content-type"] == "image/png"
    assert overall.content.startswith(b"\x89PNG")
    assert single.status_code == 200


def test_radar_png_errors(client, created):
    """Unknown cups are missing; unrecorded phases are field errors."""
    missing = client.get(f"/evaluations/{created['id']}/radar.png?cup=3", headers=HEADERS)
    cold = client.get(f"/evaluations/{created['id']}/radar.png?cup=1&phase=cold", headers=HEADERS)

    assert missing.status_code == 404
    assert cold.status_code == 400
    assert cold.json()["detail"]["field"] == "cup.scores.cold"


def test_narrative_with_template_provider(client, created):
    """The configured template provider should answer without network access."""
    response = client.post(f"/evaluations/{created['id']}/narrative", headers=HEADERS)

    body = response.json()
    assert response.status_code == 200
    assert "Overall score: 78.50" in body["report"]
    assert body["metadata"] == {"provider": "template", "language": "en"}


def test_narrative_maps_provider_errors(client, created, mocker):
    """Provider failures become 500 without leaking details."""
    provider = mocker.MagicMock()
    provider.generate.side_effect = RuntimeError("boom")
    mocker.patch("api.index._narrative_provider", return_value=provider)

    response = client.post(f"/evaluations/{created['id']}/narrative", headers=HEADERS)

    assert response.status_code == 500
    assert response.json()["detail"] == "internal_error"


def test_narrative_without_gemini_key(client, created, monkeypatch):
    """A missing Gemini key is an authentication error."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    app.dependency_overrides[get_config] = lambda: AppConfig(narrative_provider="gemini")

    response = client.post(f"/evaluations/{created['id']}/narrative", headers=HEADERS)

    assert response.status_code == 401


def test_report_pdf_with_non_ascii_name(client):
    """Names outside Latin-1 still download, with a UTF-8 file name."""
    created = client.post("/evaluations", json=_payload(name="Ethiopia 珈琲"), headers=HEADERS).json()

    response = client.get(f"/evaluations/{created['id']}/report.pdf", headers=HEADERS)

    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert 'filename="Ethiopia__Evaluation.pdf"' in disposition
    assert "filename*=UTF-8''Ethiopia_%E7%8F%88%E7%90%B2_Evaluation.pdf" in disposition
    assert response.content.startswith(b"%PDF")
