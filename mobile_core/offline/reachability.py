# =============================================================================
# mobile_core/offline/reachability.py
# Platform Reachability Source (raw, undeduplicated connectivity events)
# =============================================================================
"""
The platform side of connectivity detection.

A ReachabilitySource answers one-shot queries and pushes every raw reading to
a single listener, duplicates included. Deduplication and pausing belong to
ConnectivityMonitor, not to the source.
"""

from __future__ import annotations
import socket
import threading
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence, Tuple
import logging

logger = logging.getLogger(__name__)


class RawConnectivity(Enum):
    """Raw platform reading."""
    WIFI = "wifi"
    MOBILE = "mobile"
    NONE = "none"
    UNKNOWN = "unknown"


RawListener = Callable[[RawConnectivity], None]


class ReachabilitySource(Protocol):
    """What ConnectivityMonitor needs from the platform."""

    def check(self) -> RawConnectivity:
        """Fresh one-shot query."""
        ...

    def listen(self, callback: RawListener) -> None:
        """Subscribe to raw readings, delivered in the order they happen."""
        ...

    def cancel(self) -> None:
        """Drop the subscription."""
        ...


# Interface name prefixes used to tell cellular links from everything else
MOBILE_INTERFACE_PREFIXES = ("rmnet", "wwan", "ppp", "ccmni", "pdp_ip")
WIFI_INTERFACE_PREFIXES = ("wl", "wlan", "wifi")


def classify_interfaces(names: Sequence[str]) -> RawConnectivity:
    """
    Guess the link type from network interface names.

    Wi-Fi wins over cellular when both are up. Any other connected link
    (ethernet, docker bridges, ...) counts as Wi-Fi.
    """
    lowered = [n.lower() for n in names]
    if any(n.startswith(WIFI_INTERFACE_PREFIXES) for n in lowered):
        return RawConnectivity.WIFI
    if any(n.startswith(MOBILE_INTERFACE_PREFIXES) for n in lowered):
        return RawConnectivity.MOBILE
    return RawConnectivity.WIFI


class SocketReachabilitySource:
    """
    Reachability detected by TCP probes against well-known hosts.

    A daemon thread probes every ``interval`` seconds and reports each result
    to the listener.
    """

    def __init__(
        self,
        hosts: Sequence[Tuple[str, int]],
        interval: float = 10.0,
        timeout: float = 5.0,
    ):
        self.hosts: List[Tuple[str, int]] = list(hosts)
        self.interval = interval
        self.timeout = timeout
        self._listener: Optional[RawListener] = None
        self._poll_thread: Optional[threading.Thread] = None
        self._stop_polling = threading.Event()

    def _probe(self) -> bool:
        for host, port in self.hosts:
            try:
                with socket.create_connection((host, port), timeout=self.timeout):
                    return True
            except OSError:
                continue
        return False

    def _interface_names(self) -> List[str]:
        try:
            return [name for _, name in socket.if_nameindex()]
        except (OSError, AttributeError):
            # if_nameindex is unavailable on some platforms
            return []

    def check(self) -> RawConnectivity:
        try:
            if not self._probe():
                return RawConnectivity.NONE
            return classify_interfaces(self._interface_names())
        except Exception as e:
            logger.debug(f"Reachability probe failed: {e}")
            return RawConnectivity.UNKNOWN

    def listen(self, callback: RawListener) -> None:
        self._listener = callback
        if self._poll_thread is not None and self._poll_thread.is_alive():
            return

        self._stop_polling.clear()
        self._poll_thread = threading.Thread(
            target=self._polling_loop,
            daemon=True,
            name="ReachabilityPoller",
        )
        self._poll_thread.start()
        logger.debug("Reachability polling started")

    def cancel(self) -> None:
        self._stop_polling.set()
        if self._poll_thread is not None:
            self._poll_thread.join(timeout=self.timeout + 1)
        self._listener = None
        logger.debug("Reachability polling stopped")

    def _polling_loop(self) -> None:
        while not self._stop_polling.is_set():
            reading = self.check()
            listener = self._listener
            if listener is not None:
                try:
                    listener(reading)
                except Exception as e:
                    logger.error(f"Error in reachability listener: {e}")

            if self._stop_polling.wait(timeout=self.interval):
                break
