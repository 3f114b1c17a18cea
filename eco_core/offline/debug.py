# =============================================================================
# eco_core/offline/debug.py
# Local Cache Diagnostics
# =============================================================================
"""
Inspection and recovery hooks for the local cache, exposed on the host page
when debug mode is enabled.
"""

from __future__ import annotations
import json
from typing import Any, Dict
import logging

from eco_core.offline.cache_store import DATA_KEY, INITIALIZED_KEY, PRICE_KEY, LocalCacheStore

logger = logging.getLogger(__name__)


def check_storage(store: LocalCacheStore) -> Dict[str, Any]:
    """Summarize what is physically stored under the cache keys."""
    raw = store.snapshot()
    report: Dict[str, Any] = {
        "initialized_flag": raw[INITIALIZED_KEY],
        "price_setting": raw[PRICE_KEY],
        "collection_state": store.collection_state().value,
        "record_count": 0,
        "first_record": None,
        "last_record": None,
    }

    if report["collection_state"] == "present":
        entries = json.loads(raw[DATA_KEY])
        report["record_count"] = len(entries)
        if entries:
            report["first_record"] = entries[0]
            report["last_record"] = entries[-1]

    logger.info(f"Local cache state: {report}")
    return report


def force_reinit(manager) -> None:
    """Drop the boot flag and re-run the manager's initialization."""
    logger.info("Forcing re-initialization of the local cache")
    manager.reload()


def purge_storage(store: LocalCacheStore) -> bool:
    """Remove every cache key; the next initialization seeds from scratch."""
    logger.info("Purging local cache keys")
    return store.purge()
