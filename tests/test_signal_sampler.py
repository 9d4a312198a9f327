"""
Tests for RSSI classification, the periodic sampler and the /proc reader.
"""

import threading

import pytest

from groundstation.link.rssi import WirelessRssiReader
from groundstation.link.sampler import SignalSampler, classify_rssi
from groundstation.state.models import SignalLevel


class TestClassifyRssi:
    @pytest.mark.parametrize(
        "rssi, level",
        [
            (-50, SignalLevel.EXCELLENT),
            (-55, SignalLevel.EXCELLENT),
            (-60, SignalLevel.GOOD),
            (-67, SignalLevel.GOOD),
            (-75, SignalLevel.FAIR),
            (-80, SignalLevel.FAIR),
            (-90, SignalLevel.POOR),
            (None, SignalLevel.POOR),
        ],
    )
    def test_thresholds(self, rssi, level):
        assert classify_rssi(rssi) is level


class TestSignalSampler:
    def test_sample_once_publishes_level(self, state):
        sampler = SignalSampler(lambda: -60, state, interval=0.05)

        assert sampler.sample_once() is SignalLevel.GOOD
        assert state.signal is SignalLevel.GOOD

    def test_missing_reading_is_poor(self, state):
        sampler = SignalSampler(lambda: None, state, interval=0.05)
        assert sampler.sample_once() is SignalLevel.POOR

    def test_failing_reader_is_treated_as_missing(self, state):
        def broken():
            raise OSError("no wireless extensions")

        sampler = SignalSampler(broken, state, interval=0.05)
        assert sampler.sample_once() is SignalLevel.POOR

    def test_periodic_sampling_and_reset_on_stop(self, state):
        sampled = threading.Event()

        def reader():
            sampled.set()
            return -50

        sampler = SignalSampler(reader, state, interval=0.05)
        sampler.start()
        try:
            assert sampled.wait(2.0)
            assert sampler.is_running()
        finally:
            sampler.stop(timeout=2.0)

        assert not sampler.is_running()
        assert state.signal is SignalLevel.NONE
        assert sampler.samples_taken >= 1

    def test_start_is_idempotent(self, state):
        sampler = SignalSampler(lambda: -70, state, interval=0.05)
        sampler.start()
        first_thread = sampler._thread
        sampler.start()
        try:
            assert sampler._thread is first_thread
        finally:
            sampler.stop(timeout=2.0)

    def test_stop_without_start_publishes_none(self, state):
        state.set_signal(SignalLevel.FAIR)
        SignalSampler(lambda: -70, state).stop()
        assert state.signal is SignalLevel.NONE

    def test_abandoned_reading_is_discarded_after_restart(self, state):
        entered = threading.Event()
        release = threading.Event()
        calls = []

        def reader():
            calls.append(None)
            if len(calls) == 1:
                entered.set()
                release.wait(5.0)
                return -50
            return -90

        sampler = SignalSampler(reader, state, interval=0.05)
        sampler.start()
        assert entered.wait(2.0)
        stuck_thread = sampler._thread

        sampler.stop(timeout=0.05)
        assert stuck_thread.is_alive()
        assert state.signal is SignalLevel.NONE

        poor = threading.Event()
        state.add_listener(lambda field, value: value is SignalLevel.POOR and poor.set())

        sampler.start()
        try:
            assert sampler._thread is not stuck_thread
            assert poor.wait(2.0)

            release.set()
            stuck_thread.join(timeout=2.0)

            assert not stuck_thread.is_alive()
            assert state.signal is SignalLevel.POOR
        finally:
            sampler.stop(timeout=2.0)

        assert state.signal is SignalLevel.NONE


PROC_WIRELESS_SAMPLE = """\
Inter-| sta-|   Quality        |   Discarded packets               | Missed | WE
 face | tus | link level noise |  nwid  crypt   frag  retry   misc | beacon | 22
 wlan0: 0000   54.  -56.  -256        0      0      0      0     12        0
 wlan1: 0000   30.  -81.  -256        0      0      0      0      0        0
"""


class TestWirelessRssiReader:
    def test_first_interface(self, tmp_path):
        path = tmp_path / "wireless"
        path.write_text(PROC_WIRELESS_SAMPLE)

        assert WirelessRssiReader(path=path)() == -56

    def test_named_interface(self, tmp_path):
        path = tmp_path / "wireless"
        path.write_text(PROC_WIRELESS_SAMPLE)

        assert WirelessRssiReader("wlan1", path=path)() == -81

    def test_unknown_interface(self, tmp_path):
        path = tmp_path / "wireless"
        path.write_text(PROC_WIRELESS_SAMPLE)

        assert WirelessRssiReader("wlan9", path=path)() is None

    def test_missing_file(self, tmp_path):
        assert WirelessRssiReader(path=tmp_path / "absent")() is None

    def test_no_interfaces(self, tmp_path):
        path = tmp_path / "wireless"
        path.write_text("\n".join(PROC_WIRELESS_SAMPLE.splitlines()[:2]) + "\n")

        assert WirelessRssiReader(path=path)() is None
