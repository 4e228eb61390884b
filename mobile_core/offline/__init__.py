# =============================================================================
# mobile_core/offline/__init__.py
# Offline-Tolerant Local State: connectivity, cached entities, flags
# =============================================================================
"""
Offline-tolerant local state for the mobile client.

Architecture:
------------
    caller (view-model)
        │            │                 │
        ▼            ▼                 ▼
 ConnectivityMonitor  LocalStore     HttpService (mobile_core.network)
        │            │
        ▼            ▼
 ReachabilitySource  SQLite boxes

The components never call each other. The caller checks connectivity, calls
the HTTP client, and writes results into the store so later reads can fall
back to the cache.

Usage:
------
from mobile_core.offline import ConnectivityMonitor, LocalStore

if monitor.is_connected():
    post = Post.from_map(http.get_http("posts/1"))
    store.put(post)
else:
    post = store.get(Post, 1)
"""

from mobile_core.offline.reachability import (
    RawConnectivity,
    ReachabilitySource,
    SocketReachabilitySource,
)

from mobile_core.offline.connectivity_monitor import (
    ConnectivityMonitor,
    ConnectivityStatus,
    StatusStream,
)

from mobile_core.offline.local_store import (
    Box,
    LocalStore,
    StoreStatus,
)

from mobile_core.offline.key_storage import (
    KeyStorage,
    Setting,
)

__all__ = [
    # Reachability
    "RawConnectivity",
    "ReachabilitySource",
    "SocketReachabilitySource",
    # Connectivity
    "ConnectivityMonitor",
    "ConnectivityStatus",
    "StatusStream",
    # Local Store
    "Box",
    "LocalStore",
    "StoreStatus",
    # Key Storage
    "KeyStorage",
    "Setting",
]
