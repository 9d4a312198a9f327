"""
Tests for the HTTP status API.
"""

from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient

from groundstation.api import create_app
from groundstation.ingestion.models import Frame
from groundstation.state.models import BatterySample, CentroidSample, ConnectionStatus
from groundstation.station import GroundStation
from mock_device_streamer.utils.protocol_encoder import pack_battery


@pytest.fixture
def make_client():
    stack = ExitStack()

    def factory(port):
        station = GroundStation(
            classifier=None,
            rssi_reader=lambda: -60,
            host="127.0.0.1",
            port=port,
            read_timeout=1.0,
        )
        client = stack.enter_context(TestClient(create_app(station)))
        return client, station

    with stack:
        yield factory


class TestSystemRoutes:
    def test_root(self, make_client, free_port):
        client, _ = make_client(free_port)
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["status"] == "/status"

    def test_health_ok_when_idle(self, make_client, free_port):
        client, _ = make_client(free_port)
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["connection"] == "disconnected"


class TestStatus:
    def test_default_status(self, make_client, free_port):
        client, _ = make_client(free_port)
        body = client.get("/status").json()

        assert body["status"] == "disconnected"
        assert body["signal"] == "none"
        assert body["video"] is None
        assert body["centroid"] is None
        assert body["battery"] == {"voltage": 0.0, "percentage": 0}
        assert body["classifications"] == []

    def test_status_reflects_state(self, make_client, free_port):
        client, station = make_client(free_port)
        station.state.set_centroid(CentroidSample(120.0, 80.0))
        station.state.set_battery(BatterySample.from_voltage(3.7))

        body = client.get("/status").json()

        assert body["centroid"] == {"x": 120.0, "y": 80.0}
        assert body["battery"]["percentage"] == 50


class TestControl:
    def test_start_against_dead_device_reports_error(self, make_client, free_port):
        client, station = make_client(free_port)

        response = client.post("/stream/start")
        assert response.status_code == 200
        assert response.json()["accepted"] is True

        station.reader.join(timeout=5.0)
        assert station.status is ConnectionStatus.ERROR

        health = client.get("/health")
        assert health.status_code == 503
        assert health.json()["status"] == "degraded"

    def test_start_and_stop(self, make_client, device_server):
        server = device_server(pack_battery(3.9), hold_open=True)
        client, station = make_client(server.port)

        assert client.post("/stream/start").json()["accepted"] is True
        assert client.post("/stream/start").json()["accepted"] is False

        response = client.post("/stream/stop")
        assert response.json()["accepted"] is True

        station.reader.join(timeout=5.0)
        assert station.status is ConnectionStatus.DISCONNECTED

    def test_stop_when_idle_is_not_accepted(self, make_client, free_port):
        client, _ = make_client(free_port)

        response = client.post("/stream/stop")

        assert response.status_code == 200
        assert response.json() == {"accepted": False, "status": "disconnected"}

    def test_rejected_pressure_keeps_status_valid(self, make_client, free_port):
        client, station = make_client(free_port)
        station.reader.dispatch(Frame(type=3, payload=b"P:1000.0"))
        station.reader.dispatch(Frame(type=3, payload=b"P:-5"))

        response = client.get("/status")

        assert response.status_code == 200
        assert response.json()["pressure"]["pressure"] == 1000.0
        assert isinstance(response.json()["pressure"]["altitude"], float)
        assert station.reader.decode_failures == 1
