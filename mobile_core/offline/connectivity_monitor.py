# =============================================================================
# mobile_core/offline/connectivity_monitor.py
# Deduplicated, Pausable Connectivity Status Stream
# =============================================================================
"""
ConnectivityMonitor - turns raw platform reachability readings into a clean
status stream.

Features:
- Deduplicated emissions (never the same status twice in a row)
- Pause/resume without losing the latest reading
- Independent one-shot ``is_connected`` query
- Callbacks and a blocking iterator for consumers

Construct one monitor at startup and pass it to whoever needs it.
"""

from __future__ import annotations
import queue
import threading
import weakref
from enum import Enum
from typing import Callable, List, Optional
import logging

from mobile_core.offline.reachability import RawConnectivity, ReachabilitySource

logger = logging.getLogger(__name__)


class ConnectivityStatus(Enum):
    """Deduplicated connectivity classification."""
    WIFI = "wifi"
    CELLULAR = "cellular"
    OFFLINE = "offline"


_STATUS_BY_RAW = {
    RawConnectivity.WIFI: ConnectivityStatus.WIFI,
    RawConnectivity.MOBILE: ConnectivityStatus.CELLULAR,
    RawConnectivity.NONE: ConnectivityStatus.OFFLINE,
}


def convert_result(result: Optional[RawConnectivity]) -> ConnectivityStatus:
    """Map a raw reading to a status. Unknown readings count as offline."""
    return _STATUS_BY_RAW.get(result, ConnectivityStatus.OFFLINE)


class ConnectivityMonitor:
    """
    Connectivity status stream over a ReachabilitySource.

    States are Running (initial) and Paused. Construction subscribes to the
    source immediately.

    Usage:
        monitor = ConnectivityMonitor(SocketReachabilitySource(hosts))
        monitor.register_callback(lambda status: print(status))
        if monitor.is_connected():
            ...
    """

    def __init__(self, source: ReachabilitySource):
        self._source = source
        self._lock = threading.RLock()
        self._last_emitted: Optional[ConnectivityStatus] = None
        self._paused = False
        self._held: Optional[RawConnectivity] = None
        self._callbacks: List[Callable[[ConnectivityStatus], None]] = []
        self._queues: List[queue.Queue] = []

        self._source.listen(self._on_raw_event)

    @property
    def last_status(self) -> Optional[ConnectivityStatus]:
        """Last status emitted on the stream (None before the first one)."""
        return self._last_emitted

    @property
    def is_running(self) -> bool:
        return not self._paused

    def is_connected(self) -> bool:
        """
        Fresh platform query, independent of the stream.

        Returns:
            True on Wi-Fi or cellular, False otherwise (including errors)
        """
        try:
            result = self._source.check()
        except Exception as e:
            logger.warning(f"Connectivity check failed, assuming offline: {e}")
            return False
        return convert_result(result) is not ConnectivityStatus.OFFLINE

    def start(self) -> None:
        """Resume delivery. The reading held while paused is processed first."""
        with self._lock:
            if not self._paused:
                return
            if not self._resume_signal():
                logger.info("ConnectivityMonitor resume refused by resume signal")
                return

            logger.debug("ConnectivityMonitor resumed")
            self._paused = False
            held, self._held = self._held, None
            if held is not None:
                self._emit_connectivity(held)

    def stop(self) -> None:
        """Pause delivery. Readings keep arriving; only the newest is held."""
        with self._lock:
            if self._paused:
                return
            logger.debug("ConnectivityMonitor paused")
            self._paused = True

    def close(self) -> None:
        """Cancel the platform subscription. Only for process shutdown."""
        self._source.cancel()
        logger.debug("ConnectivityMonitor closed")

    def _resume_signal(self) -> bool:
        """Readiness gate consulted on every start(). Always ready for now."""
        return True

    def _on_raw_event(self, event: RawConnectivity) -> None:
        with self._lock:
            if self._paused:
                self._held = event
                return
            self._emit_connectivity(event)

    def _emit_connectivity(self, event: RawConnectivity) -> None:
        status = convert_result(event)
        if status is self._last_emitted:
            return

        logger.debug(f"Connectivity status changed to {status.value}")
        self._last_emitted = status
        for q in self._queues:
            q.put(status)
        self._notify_callbacks(status)

    # =========================================================================
    # CONSUMERS
    # =========================================================================

    def register_callback(self, callback: Callable[[ConnectivityStatus], None]) -> None:
        """
        Register a callback for emitted statuses.

        Args:
            callback: Function called with each emitted ConnectivityStatus
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable[[ConnectivityStatus], None]) -> None:
        """Remove a registered callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self, status: ConnectivityStatus) -> None:
        for callback in list(self._callbacks):
            try:
                callback(status)
            except Exception as e:
                logger.error(f"Error in connectivity callback: {e}")

    def status_stream(self, timeout: Optional[float] = None) -> StatusStream:
        """
        Blocking iterator over statuses emitted from now on.

        Args:
            timeout: Seconds to wait for each status. The iterator ends when
                it expires; with None it waits forever.

        Usage:
            with monitor.status_stream(timeout=5) as stream:
                for status in stream:
                    ...
        """
        return StatusStream(self, timeout)

    def _add_queue(self, q: queue.Queue) -> None:
        with self._lock:
            self._queues.append(q)

    def _remove_queue(self, q: queue.Queue) -> None:
        with self._lock:
            if q in self._queues:
                self._queues.remove(q)


class StatusStream:
    """
    Consumer side of ConnectivityMonitor.status_stream().

    The queue is detached from the monitor when the stream is closed, runs
    out (timeout) or is garbage-collected, whether or not it was ever read.
    """

    def __init__(self, monitor: ConnectivityMonitor, timeout: Optional[float] = None):
        self._queue: queue.Queue = queue.Queue()
        self._timeout = timeout
        monitor._add_queue(self._queue)
        self._detach = weakref.finalize(self, monitor._remove_queue, self._queue)

    @property
    def closed(self) -> bool:
        return not self._detach.alive

    def __iter__(self) -> StatusStream:
        return self

    def __next__(self) -> ConnectivityStatus:
        if self.closed:
            raise StopIteration
        try:
            return self._queue.get(timeout=self._timeout)
        except queue.Empty:
            self.close()
            raise StopIteration from None

    def close(self) -> None:
        """Stop receiving statuses. Idempotent."""
        self._detach()

    def __enter__(self) -> StatusStream:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
