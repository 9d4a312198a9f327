"""
Test Configuration
==================

Pytest fixtures and helpers for the ground station tests.
"""

import socket
import threading

import numpy as np
import pytest

from groundstation.state.models import FRAME_HEIGHT, FRAME_WIDTH, Classification, VideoFrame
from groundstation.state.stream_state import StreamState


class DeviceServer:
    """
    Local TCP server standing in for the device.

    Accepts one client, sends `data`, then either closes (clean end of
    stream) or holds the connection open until close() is called.
    """

    def __init__(self, data: bytes = b"", hold_open: bool = False):
        self.data = data
        self.hold_open = hold_open

        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self._sock.settimeout(5.0)
        self.host, self.port = self._sock.getsockname()

        self._release = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        try:
            conn, _ = self._sock.accept()
        except OSError:
            return
        with conn:
            try:
                conn.sendall(self.data)
            except OSError:
                return
            if self.hold_open:
                self._release.wait(10.0)

    def close(self):
        self._release.set()
        self._sock.close()
        self._thread.join(timeout=2.0)


class RecordingListener:
    """Collects (field_name, value) events published by StreamState."""

    def __init__(self):
        self.events = []
        self._lock = threading.Lock()

    def __call__(self, field_name, value):
        with self._lock:
            self.events.append((field_name, value))

    def values(self, field_name):
        with self._lock:
            return [v for f, v in self.events if f == field_name]

    def fields(self):
        with self._lock:
            return [f for f, _ in self.events]


@pytest.fixture
def device_server():
    """Factory for DeviceServer instances, all closed after the test."""
    servers = []

    def factory(data: bytes = b"", hold_open: bool = False) -> DeviceServer:
        server = DeviceServer(data, hold_open=hold_open)
        servers.append(server)
        return server

    yield factory

    for server in servers:
        server.close()


@pytest.fixture
def free_port():
    """A local port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def state():
    return StreamState()


@pytest.fixture
def listener(state):
    recorder = RecordingListener()
    state.add_listener(recorder)
    return recorder


@pytest.fixture
def video_frame():
    return VideoFrame(pixels=np.zeros((FRAME_HEIGHT, FRAME_WIDTH), dtype=np.uint16))


@pytest.fixture
def sample_classifications():
    return [
        Classification(label="person", score=0.91),
        Classification(label="car", score=0.64),
    ]
