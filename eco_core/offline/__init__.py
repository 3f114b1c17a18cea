# =============================================================================
# eco_core/offline/__init__.py
# Offline-First Local Cache
# =============================================================================
"""
Offline-First Local Cache

┌──────────────────────────────────────────────┐
│              DataManager (façade)            │
└──────────────────────────────────────────────┘
          │                        │
          ▼                        ▼
┌──────────────────┐    ┌──────────────────────┐
│ BootstrapLoader  │───►│   LocalCacheStore    │
│ (first-run seed) │    │ (records/price/flag) │
└──────────────────┘    └──────────────────────┘
                                   │
                                   ▼
                        ┌──────────────────────┐
                        │   KeyValueStorage    │
                        │  (SQLite / memory)   │
                        └──────────────────────┘

Usage:
------
from eco_core.offline import LocalCacheStore, SQLiteStorage, BootstrapLoader

store = LocalCacheStore(SQLiteStorage("local_data/ecometrics.db"))
BootstrapLoader(store).run()
records = store.load_records()
"""

from eco_core.offline.storage import (
    KeyValueStorage,
    SQLiteStorage,
    MemoryStorage,
)

from eco_core.offline.cache_store import (
    LocalCacheStore,
    CollectionState,
    DATA_KEY,
    PRICE_KEY,
    INITIALIZED_KEY,
)

from eco_core.offline.bootstrap import (
    BootstrapLoader,
    BootstrapResult,
    BootstrapStatus,
    DEFAULT_SEED_PATH,
)

from eco_core.offline.debug import (
    check_storage,
    force_reinit,
    purge_storage,
)

__all__ = [
    # Storage media
    "KeyValueStorage",
    "SQLiteStorage",
    "MemoryStorage",
    # Local cache
    "LocalCacheStore",
    "CollectionState",
    "DATA_KEY",
    "PRICE_KEY",
    "INITIALIZED_KEY",
    # Bootstrap
    "BootstrapLoader",
    "BootstrapResult",
    "BootstrapStatus",
    "DEFAULT_SEED_PATH",
    # Diagnostics
    "check_storage",
    "force_reinit",
    "purge_storage",
]
