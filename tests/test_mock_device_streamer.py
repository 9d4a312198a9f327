"""
Tests for the mock device: its encoder and one streaming session.
"""

import socket
import sys
import threading

import numpy as np
import pytest

from groundstation.ingestion.frame_codec import FrameCodec
from groundstation.ingestion.message_decoders import DECODERS
from groundstation.ingestion.models import MessageType
from groundstation.state.models import BatterySample, CentroidSample, VideoFrame
from mock_device_streamer.server import main, stream_to_client
from mock_device_streamer.utils.frame_generator import block_center, generate_frame
from mock_device_streamer.utils.protocol_encoder import encode_rgb565, pack_message


class TestEncoder:
    def test_str_payload_is_utf8(self):
        assert pack_message(3, "P:1000.00") == pack_message(3, b"P:1000.00")

    def test_type_must_fit_a_byte(self):
        with pytest.raises(ValueError):
            pack_message(256, b"x")

    def test_rgb565_size(self):
        assert len(encode_rgb565(generate_frame(0))) == 153600

    def test_rgb565_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            encode_rgb565(np.zeros((10, 10, 3), dtype=np.uint8))


class TestStreamingSession:
    def test_first_frame_carries_video_and_telemetry(self):
        device, receiver = socket.socketpair()
        stop_event = threading.Event()
        sender = threading.Thread(
            target=stream_to_client, args=(device, 50, 0, stop_event), daemon=True
        )
        sender.start()

        try:
            receiver.settimeout(5.0)
            with receiver.makefile("rb") as source:
                frames = FrameCodec(source).frames()
                received = [next(frames) for _ in range(5)]
        finally:
            stop_event.set()
            receiver.close()
            sender.join(timeout=5.0)
            device.close()

        types = [MessageType(f.type) for f in received]
        assert types == [
            MessageType.VIDEO,
            MessageType.CENTROID,
            MessageType.PRESSURE,
            MessageType.GPS,
            MessageType.BATTERY,
        ]

        decoded = [DECODERS[t](f.payload) for t, f in zip(types, received)]
        assert isinstance(decoded[0], VideoFrame)
        assert decoded[1] == CentroidSample(*(float(v) for v in block_center(0)))
        assert isinstance(decoded[4], BatterySample)
        assert 0 <= decoded[4].percentage <= 100


class TestCommandLine:
    @pytest.mark.parametrize("fps", ["0", "-5"])
    def test_non_positive_fps_rejected(self, monkeypatch, fps):
        monkeypatch.setattr(sys, "argv", ["mock-device-streamer", "--fps", fps])

        with pytest.raises(SystemExit) as excinfo:
            main()

        assert excinfo.value.code == 2
