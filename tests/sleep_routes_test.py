"""HTTP routes: score endpoint and simulated lab upload."""

import importlib

import pytest
from fastapi.testclient import TestClient

from shield_sleep.api.main import app, create_app
from shield_sleep.api.routes.sleep_routes import get_config, get_sleep_service
from shield_sleep.config.config_manager import ConfigManager
from shield_sleep.core.services.sleep_service import SleepService


class BrokenCalculator:
    def calculate_score(self, metrics):
        raise RuntimeError("boom")


@pytest.fixture
def client(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("upload:\n  simulated_delay_seconds: 0\n")
    app.dependency_overrides[get_config] = lambda: ConfigManager(str(config_path))
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["documentation"] == "/docs"


def test_score_endpoint(client):
    response = client.post("/api/sleep/score", json={
        "totalSleepHours": 6,
        "sleepEfficiencyPercent": 72,
        "remPercent": 35,
        "age": 15,
        "sex": "Male",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["score"] == 75
    assert body["bioAgeDelta"] == "+2.5"
    assert body["alerts"] == [
        "Very low sleep efficiency.",
        "High REM sleep percentage.",
        "Age out of typical adult range for these sleep guidelines.",
    ]
    assert len(body["suggestions"]) == 3


def test_score_endpoint_healthy(client):
    response = client.post("/api/sleep/score", json={
        "totalSleepHours": 8,
        "sleepEfficiencyPercent": 90,
        "remPercent": 20,
        "age": 30,
        "sex": "Female",
    })
    assert response.status_code == 200
    assert response.json() == {"score": 100, "bioAgeDelta": "+0.0", "alerts": [], "suggestions": []}


def test_score_endpoint_rejects_invalid_input(client):
    response = client.post("/api/sleep/score", json={
        "totalSleepHours": -1,
        "sleepEfficiencyPercent": 90,
        "remPercent": 20,
        "age": 30,
        "sex": "",
    })
    assert response.status_code == 400
    body = response.json()
    assert body["score"] == 0
    assert body["bioAgeDelta"] is None
    assert len(body["alerts"]) == 1
    assert "totalSleepHours" in body["alerts"][0]
    assert "sex" in body["alerts"][0]
    assert body["suggestions"] == []


def test_score_endpoint_reports_engine_failure(client):
    app.dependency_overrides[get_sleep_service] = lambda: SleepService(BrokenCalculator())
    response = client.post("/api/sleep/score", json={
        "totalSleepHours": 8,
        "sleepEfficiencyPercent": 90,
        "remPercent": 20,
        "age": 30,
        "sex": "Male",
    })
    assert response.status_code == 500
    assert response.json() == {
        "score": 0,
        "bioAgeDelta": None,
        "alerts": ["An internal server error occurred."],
        "suggestions": [],
    }


def test_lab_upload(client):
    response = client.post(
        "/api/sleep/lab/upload",
        files={"file": ("bloodwork.pdf", b"%PDF-1.4 fake", "application/pdf")},
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Lab report 'bloodwork.pdf' received for simulated processing."}


def test_lab_upload_empty_file(client):
    response = client.post(
        "/api/sleep/lab/upload",
        files={"file": ("empty.pdf", b"", "application/pdf")},
    )
    assert response.status_code == 400
    assert response.json() == {"message": "No file selected for upload."}


def test_lab_upload_large_file(client):
    response = client.post(
        "/api/sleep/lab/upload",
        files={"file": ("scan.pdf", b"x" * (2 * 1024 * 1024), "application/pdf")},
    )
    assert response.status_code == 200


def test_score_endpoint_rejects_boolean_age(client):
    response = client.post("/api/sleep/score", json={
        "totalSleepHours": 8,
        "sleepEfficiencyPercent": 90,
        "remPercent": 20,
        "age": True,
        "sex": "Male",
    })
    assert response.status_code == 400
    assert "age" in response.json()["alerts"][0]


def test_create_app_uses_given_config(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "api:\n  title: Test API\n  cors_origins:\n    - http://example.test\n"
        "upload:\n  simulated_delay_seconds: 0\n"
    )
    test_app = create_app(ConfigManager(str(config_path)))
    assert test_app.title == "Test API"

    response = TestClient(test_app).options(
        "/api/sleep/score",
        headers={"Origin": "http://example.test", "Access-Control-Request-Method": "POST"},
    )
    assert response.headers["access-control-allow-origin"] == "http://example.test"


def test_importing_app_does_not_configure_logging(monkeypatch):
    import shield_sleep.api.main as main_module

    def fail(self):
        raise AssertionError("logging configured at import")

    monkeypatch.setattr(ConfigManager, "configure_logging", fail)
    importlib.reload(main_module)
