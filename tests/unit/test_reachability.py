# =============================================================================
# tests/unit/test_reachability.py
# Unit Tests for the Socket Reachability Source
# =============================================================================

import threading
from unittest.mock import patch

import pytest

from mobile_core.offline.reachability import (
    RawConnectivity,
    SocketReachabilitySource,
    classify_interfaces,
)


@pytest.fixture
def source():
    return SocketReachabilitySource(hosts=[("203.0.113.1", 53)], interval=0.01, timeout=0.1)


class TestClassifyInterfaces:

    @pytest.mark.parametrize("names, expected", [
        (["lo", "wlan0"], RawConnectivity.WIFI),
        (["lo", "rmnet_data0"], RawConnectivity.MOBILE),
        (["lo", "pdp_ip0", "en0"], RawConnectivity.MOBILE),
        (["lo", "wlan0", "rmnet0"], RawConnectivity.WIFI),
        (["lo", "eth0"], RawConnectivity.WIFI),
        ([], RawConnectivity.WIFI),
    ])
    def test_classification(self, names, expected):
        assert classify_interfaces(names) is expected


class TestCheck:

    def test_unreachable_hosts_mean_none(self, source):
        with patch.object(source, "_probe", return_value=False):
            assert source.check() is RawConnectivity.NONE

    def test_reachable_host_uses_interfaces(self, source):
        with patch.object(source, "_probe", return_value=True), \
                patch.object(source, "_interface_names", return_value=["rmnet0"]):
            assert source.check() is RawConnectivity.MOBILE

    def test_probe_error_is_unknown(self, source):
        with patch.object(source, "_probe", side_effect=RuntimeError("no sockets")):
            assert source.check() is RawConnectivity.UNKNOWN

    def test_probe_tries_next_host(self, source):
        source.hosts = [("203.0.113.1", 53), ("203.0.113.2", 53)]
        attempts = []

        def fake_connect(address, timeout):
            attempts.append(address)
            if address[0] == "203.0.113.1":
                raise OSError("unreachable")
            return _Connection()

        with patch("mobile_core.offline.reachability.socket.create_connection", side_effect=fake_connect):
            assert source._probe() is True

        assert attempts == [("203.0.113.1", 53), ("203.0.113.2", 53)]


class TestPolling:

    def test_listen_delivers_readings_until_cancelled(self, source):
        received = []
        delivered = threading.Event()

        def listener(reading):
            received.append(reading)
            if len(received) >= 3:
                delivered.set()

        with patch.object(source, "check", return_value=RawConnectivity.NONE):
            source.listen(listener)
            assert delivered.wait(timeout=5)
            source.cancel()

        assert set(received) == {RawConnectivity.NONE}
        assert not source._poll_thread.is_alive()


class _Connection:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False
