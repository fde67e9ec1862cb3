"""
Tests for the HTTP API

The engine is attached to ``app.state`` directly, so most tests run
without the lifespan (no scheduler thread, no files on disk).

Run with: pytest tests/test_api.py -v
"""

import json
import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.models import ValidationReportResponse
from core.model import ModelStore, Room
from core.telemetry import TelemetrySample
from core.twin import DigitalTwin

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def build_twin():
    store = ModelStore([
        Room(id="R1", name="Meeting Room", temperature=28.0, rated_power=1800.0),
        Room(id="R2", name="Open Office", temperature=24.0, rated_power=3500.0),
    ])
    samples = [
        TelemetrySample("2024-07-15 12:00", 41.2, 32.0, 18),
        TelemetrySample("2024-07-15 12:15", 42.0, 32.4, 20),
    ]
    return DigitalTwin(store, samples)


class TestTwinEndpoints:
    """Tests for the /api routes."""

    def setup_method(self):
        """Set up test fixtures."""
        self.twin = build_twin()
        app.state.twin = self.twin
        self.client = TestClient(app)

    def teardown_method(self):
        app.state.twin = None

    def test_hello(self):
        """Test the connectivity check."""
        response = self.client.get("/api/hello")

        assert response.status_code == 200
        assert response.text == "Digital Twin Server is Online!"

    def test_status_text(self):
        """Test status is plain text."""
        response = self.client.get("/api/status")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text.startswith("=== SmartOffice LIVE STATUS ===")

    def test_dashboard_json(self):
        """Test the dashboard payload."""
        self.twin.tick()

        response = self.client.get("/api/dashboard")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        data = response.json()
        assert data["timestamp"] == "2024-07-15 12:00"
        assert [r["id"] for r in data["rooms"]] == ["R1", "R2"]

    def test_control_then_tick(self):
        """Test a control command drives the next tick."""
        response = self.client.post("/api/control", params={"roomId": "R1", "action": "OFF"})

        assert response.status_code == 200
        assert response.text == "Command sent: R1 -> OFF"

        self.twin.tick()
        room = self.client.get("/api/dashboard").json()["rooms"][0]
        assert room["hvac"] == "OFF"
        assert room["mode"] == "MANUAL"
        assert room["power"] == 0.0

    def test_control_requires_room(self):
        """Test roomId is mandatory."""
        response = self.client.post("/api/control", params={"action": "OFF"})

        assert response.status_code == 422

    def test_overrides_listing(self):
        """Test the override table endpoint."""
        self.client.post("/api/control", params={"roomId": "R2", "action": "ON"})
        self.client.post("/api/control", params={"roomId": "R1", "action": "OFF"})
        self.client.post("/api/control", params={"roomId": "R1", "action": "AUTO"})

        data = self.client.get("/api/overrides").json()

        assert data == {"count": 1, "overrides": {"R2": "FORCE_ON"}}

    def test_validation_text(self):
        """Test the validation report is plain text."""
        response = self.client.get("/api/validation")

        assert response.status_code == 200
        assert "VALIDATION REPORT (room_constraints)" in response.text
        assert "✔ Validation PASSED. System is healthy." in response.text

    def test_validation_issues(self):
        """Test the JSON issue list."""
        with self.twin.store.mutation() as rooms:
            rooms[1].temperature = 36.0

        data = self.client.get("/api/validation/issues").json()

        assert data["status"] == "FAIL"
        assert data["issue_count"] == 1
        assert data["issues"][0]["element"] == "Room R2 (Open Office)"

    def test_simulation_state(self):
        """Test scheduler and cursor counters."""
        self.twin.tick()
        self.twin.tick()

        data = self.client.get("/api/simulation").json()

        assert data["initialized"] is True
        assert data["scheduler_running"] is False
        assert data["dataset_rows"] == 2
        assert data["cursor_index"] == 0
        assert data["dataset_restarts"] == 1
        assert data["last_step"] == 1

    def test_health_reports_stopped_scheduler(self):
        """Test /health without a running scheduler."""
        data = self.client.get("/health").json()

        assert data["engine"] == "stopped"
        assert data["status"] == "degraded"

    def test_ready(self):
        """Test readiness with an initialized engine."""
        assert self.client.get("/ready").json() == {"ready": True}


class TestWithoutEngine:
    """Tests for requests before the engine exists."""

    def setup_method(self):
        """Set up test fixtures."""
        app.state.twin = None
        self.client = TestClient(app)

    def test_status_unavailable(self):
        """Test twin routes return 503."""
        response = self.client.get("/api/status")

        assert response.status_code == 503
        assert response.json()["error"] is True

    def test_uninitialized_engine_dashboard(self):
        """Test an engine without data returns an error object."""
        app.state.twin = DigitalTwin(None, None)
        try:
            response = self.client.get("/api/dashboard")
            assert response.status_code == 200
            assert "error" in json.loads(response.text)

            response = self.client.get("/api/validation/issues")
            assert response.status_code == 503
        finally:
            app.state.twin = None

    def test_not_ready(self):
        """Test readiness fails without an engine."""
        assert self.client.get("/ready").status_code == 503

    def test_live(self):
        """Test liveness is independent of the engine."""
        assert self.client.get("/live").json() == {"alive": True}


class TestLifespan:
    """Tests for engine startup and shutdown."""

    def test_startup_loads_files(self, monkeypatch):
        """Test the lifespan builds the engine from environment settings."""
        monkeypatch.setenv("TWIN_MODEL_PATH", str(DATA_DIR / "smart_office.json"))
        monkeypatch.setenv("TWIN_DATASET_PATH", str(DATA_DIR / "cleandata.csv"))
        monkeypatch.setenv("TWIN_AUTOSTART", "false")

        with TestClient(app) as client:
            twin = app.state.twin
            assert twin.is_initialized
            assert not twin.scheduler.is_running
            assert "R5" in client.get("/api/status").text

        assert app.state.twin is None

    def test_missing_model_aborts_startup(self, monkeypatch, tmp_path):
        """Test startup fails when the model cannot be loaded."""
        monkeypatch.setenv("TWIN_MODEL_PATH", str(tmp_path / "missing.json"))
        monkeypatch.setenv("TWIN_DATASET_PATH", str(DATA_DIR / "cleandata.csv"))
        monkeypatch.setenv("TWIN_AUTOSTART", "false")
        app.state.twin = None

        with pytest.raises(Exception):
            with TestClient(app):
                pass

        assert app.state.twin is None

    def test_bad_configuration_aborts_startup(self, monkeypatch, caplog):
        """Test a malformed setting is logged as a fatal startup error."""
        monkeypatch.setenv("TWIN_MODEL_PATH", str(DATA_DIR / "smart_office.json"))
        monkeypatch.setenv("TWIN_DATASET_PATH", str(DATA_DIR / "cleandata.csv"))
        monkeypatch.setenv("TWIN_TICK_SECONDS", "fast")
        app.state.twin = None

        with caplog.at_level(logging.ERROR, logger="api.main"):
            with pytest.raises(Exception):
                with TestClient(app):
                    pass

        assert "Fatal Error" in caplog.text
        assert "TWIN_TICK_SECONDS" in caplog.text
        assert app.state.twin is None


class TestResponseModels:
    """Tests for OpenAPI metadata on response models."""

    def test_validation_report_example(self):
        """Test the report model publishes its example in the JSON schema."""
        schema = ValidationReportResponse.model_json_schema()

        assert schema["example"]["status"] == "FAIL"
        assert schema["example"]["issues"][0]["constraint"] == "TemperatureSafetyCeiling"
