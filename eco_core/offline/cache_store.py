# =============================================================================
# eco_core/offline/cache_store.py
# Local Cache Store - records, unit price and boot flag under fixed keys
# =============================================================================
"""
LocalCacheStore - synchronous persistence of the tracker's three entities.

Keys:
    ecoMetricsData              JSON array of MetricRecord objects
    ecoMetricsElectricityPrice  stringified number
    ecoMetricsInitialized       "true" or absent

Storage-medium failures never escape this class: reads degrade to empty/default
values and writes report False. Every failure is logged.
"""

from __future__ import annotations
import json
import math
from enum import Enum
from typing import Any, Dict, Iterable, List
import logging

from eco_core.errors import RecordValidationError, StorageError
from eco_core.models import DEFAULT_ELECTRICITY_PRICE, MetricRecord
from eco_core.offline.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DATA_KEY = "ecoMetricsData"
PRICE_KEY = "ecoMetricsElectricityPrice"
INITIALIZED_KEY = "ecoMetricsInitialized"


class CollectionState(Enum):
    """State of the stored record collection."""
    MISSING = "missing"     # Key absent
    CORRUPT = "corrupt"     # Unparseable JSON or not an array
    PRESENT = "present"     # JSON array (possibly empty)


class LocalCacheStore:
    """Local cache of the record collection, price setting and boot flag."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    # =========================================================================
    # BOOT FLAG
    # =========================================================================

    def is_initialized(self) -> bool:
        """True iff first-run seeding has completed."""
        try:
            return self.storage.get_item(INITIALIZED_KEY) == "true"
        except StorageError as e:
            logger.error(f"Error reading boot flag: {e}")
            return False

    def mark_initialized(self) -> bool:
        try:
            self.storage.set_item(INITIALIZED_KEY, "true")
            return True
        except StorageError as e:
            logger.error(f"Error setting boot flag: {e}")
            return False

    def reset_initialization(self) -> bool:
        """Clear the boot flag only, forcing a re-seed on the next bootstrap."""
        try:
            self.storage.remove_item(INITIALIZED_KEY)
            return True
        except StorageError as e:
            logger.error(f"Error resetting boot flag: {e}")
            return False

    # =========================================================================
    # RECORDS
    # =========================================================================

    def _read_collection(self) -> Any:
        raw = self.storage.get_item(DATA_KEY)
        return None if raw is None else json.loads(raw)

    def collection_state(self) -> CollectionState:
        try:
            payload = self._read_collection()
        except (StorageError, ValueError) as e:
            logger.warning(f"Stored record collection is unreadable: {e}")
            return CollectionState.CORRUPT

        if payload is None:
            return CollectionState.MISSING
        if not isinstance(payload, list):
            return CollectionState.CORRUPT
        return CollectionState.PRESENT

    def load_records(self) -> List[MetricRecord]:
        """
        Load the stored collection. Never raises.

        Malformed entries are dropped with a warning; an unreadable collection
        yields an empty list.
        """
        try:
            payload = self._read_collection()
        except (StorageError, ValueError) as e:
            logger.error(f"Error loading data from local storage: {e}")
            return []

        if payload is None:
            return []
        if not isinstance(payload, list):
            logger.error(f"Stored data is not a list ({type(payload).__name__}), ignoring it")
            return []

        records = []
        for index, item in enumerate(payload):
            try:
                records.append(MetricRecord.from_dict(item))
            except RecordValidationError as e:
                logger.warning(f"Dropping malformed stored record at index {index}: {e}")
        return records

    def save_records(self, records: Iterable[MetricRecord]) -> bool:
        """Persist the full collection. Returns False on storage failure."""
        try:
            payload = json.dumps([record.to_dict() for record in records])
            self.storage.set_item(DATA_KEY, payload)
            return True
        except StorageError as e:
            logger.error(f"Error saving data to local storage: {e}")
            return False

    # =========================================================================
    # PRICE SETTING
    # =========================================================================

    def get_price(self) -> float:
        try:
            raw = self.storage.get_item(PRICE_KEY)
        except StorageError as e:
            logger.error(f"Error getting electricity price: {e}")
            return DEFAULT_ELECTRICITY_PRICE

        if raw is None:
            return DEFAULT_ELECTRICITY_PRICE
        try:
            price = float(raw)
        except ValueError:
            logger.warning(f"Stored electricity price {raw!r} is not a number, using default")
            return DEFAULT_ELECTRICITY_PRICE

        if math.isnan(price) or math.isinf(price) or price <= 0:
            logger.warning(f"Stored electricity price {raw!r} is out of range, using default")
            return DEFAULT_ELECTRICITY_PRICE
        return price

    def set_price(self, price: float) -> bool:
        try:
            self.storage.set_item(PRICE_KEY, str(float(price)))
            return True
        except StorageError as e:
            logger.error(f"Error setting electricity price: {e}")
            return False

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    def clear_all(self) -> bool:
        """Empty the collection and restore the default price. The boot flag stays."""
        try:
            self.storage.set_item(DATA_KEY, json.dumps([]))
            self.storage.set_item(PRICE_KEY, str(DEFAULT_ELECTRICITY_PRICE))
            return True
        except StorageError as e:
            logger.error(f"Error clearing data: {e}")
            return False

    def purge(self) -> bool:
        """Remove all three keys, returning the store to its never-used state."""
        try:
            for key in (DATA_KEY, PRICE_KEY, INITIALIZED_KEY):
                self.storage.remove_item(key)
            return True
        except StorageError as e:
            logger.error(f"Error purging local storage: {e}")
            return False

    def snapshot(self) -> Dict[str, Any]:
        """Raw values of the three keys, for diagnostics."""
        snapshot: Dict[str, Any] = {}
        for key in (INITIALIZED_KEY, DATA_KEY, PRICE_KEY):
            try:
                snapshot[key] = self.storage.get_item(key)
            except StorageError as e:
                snapshot[key] = f"<unreadable: {e.message}>"
        return snapshot
