# =============================================================================
# mobile_core/bootstrap.py
# Composition Root: build each core component exactly once
# =============================================================================
"""
Startup wiring.

Call ``build_core`` once when the app starts and hand the returned components
to whoever needs them. There are no module-level singletons.

Usage:
    core = build_core(load_config("mobile_core.toml"))
    if core.monitor.is_connected():
        ...
    core.shutdown()
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from mobile_core.config import CoreConfig, load_config
from mobile_core.logging import get_logger, setup_logging
from mobile_core.network.http_service import HttpService
from mobile_core.offline.connectivity_monitor import ConnectivityMonitor
from mobile_core.offline.key_storage import KeyStorage
from mobile_core.offline.local_store import LocalStore, StoreStatus
from mobile_core.offline.reachability import ReachabilitySource, SocketReachabilitySource

logger = get_logger(__name__)


@dataclass
class CoreServices:
    config: CoreConfig
    monitor: ConnectivityMonitor
    store: LocalStore
    http: HttpService
    key_storage: KeyStorage
    store_status: StoreStatus

    def shutdown(self) -> None:
        """Release the transport, the platform subscription and the boxes."""
        self.http.dispose()
        self.monitor.close()
        self.store.close()
        self.key_storage.close()
        logger.info("Core services shut down")


def build_core(
    config: Optional[CoreConfig] = None,
    reachability: Optional[ReachabilitySource] = None,
    configure_logging: bool = False,
) -> CoreServices:
    """
    Construct and initialise every core component.

    Args:
        config: Configuration (``load_config()`` when None)
        reachability: Platform source (TCP probing when None)
        configure_logging: Also install the handlers described by ``config``

    Returns:
        CoreServices holding the single instance of each component
    """
    config = config or load_config()

    if configure_logging:
        setup_logging(config)

    if reachability is None:
        reachability = SocketReachabilitySource(
            hosts=config.probe_hosts,
            interval=config.probe_interval,
            timeout=config.probe_timeout,
        )

    store = LocalStore(config.storage_dir)
    store_status = store.init()
    if store_status is StoreStatus.DEGRADED_EMPTY:
        logger.warning("Starting with an empty, non-persistent cache")

    return CoreServices(
        config=config,
        monitor=ConnectivityMonitor(reachability),
        store=store,
        http=HttpService.from_config(config),
        key_storage=KeyStorage(config.storage_dir),
        store_status=store_status,
    )
