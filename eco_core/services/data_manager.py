# =============================================================================
# eco_core/services/data_manager.py
# DataManager - offline-first façade over the local cache
# =============================================================================
"""
DataManager - the local-cache variant of MetricsDataService.

Holds an in-memory mirror of the record collection and the current price,
loaded from the LocalCacheStore at initialization. Every mutation updates the
mirror, re-sorts it by date and writes it through to the store before
returning. The boolean result of a mutation is the persistence outcome.

Usage:
------
store = LocalCacheStore(SQLiteStorage("local_data/ecometrics.db"))
manager = DataManager(store, BootstrapLoader(store))
manager.initialize()

manager.save_entry({"date": "2024-01-02", "powerConsumption": 10,
                    "drinkingWater": 5, "irrigationWater": 2,
                    "electricityPrice": 30})
records = manager.get_data()
"""

from __future__ import annotations
import json
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from eco_core.data.io import Downloader, ExportPayload, build_export, read_import_source
from eco_core.errors import ConfirmationRequiredError, MalformedPayloadError
from eco_core.models import (
    DEFAULT_ELECTRICITY_PRICE,
    MetricRecord,
    apply_query,
    coerce_record,
    derive_price,
    normalize_records,
    parse_records,
    validate_price,
)
from eco_core.offline.bootstrap import BootstrapLoader
from eco_core.offline.cache_store import LocalCacheStore
from eco_core.services.base_service import MetricsDataService

# Returns a path, bytes, JSON text or an uploaded file; None when the user cancels
FilePicker = Callable[[], Any]


class DataManager(MetricsDataService):
    """Local-cache backed data service with write-through persistence."""

    mode = "local"

    def __init__(
        self,
        store: LocalCacheStore,
        bootstrap_loader: BootstrapLoader,
        downloader: Optional[Downloader] = None,
        file_picker: Optional[FilePicker] = None,
    ):
        super().__init__(downloader=downloader)
        self.store = store
        self.bootstrap_loader = bootstrap_loader
        self.file_picker = file_picker
        self._records: List[MetricRecord] = []
        self._price = DEFAULT_ELECTRICITY_PRICE
        self._lock = threading.RLock()

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    def initialize(self) -> None:
        """Seed the cache on first run, then load it into memory. Never raises."""
        with self._lock:
            self.init_error = None
            try:
                with self.log_operation("Initializing local data"):
                    self.bootstrap_loader.run()
                    self._records = normalize_records(self.store.load_records())
                    self._price = self.store.get_price()
            except Exception as e:
                # Startup must always end in a usable state
                self.logger.error(f"Failed to initialize data, continuing empty: {e}")
                self.init_error = str(e)
                self._records = []
                self._price = DEFAULT_ELECTRICITY_PRICE
                return

            self.logger.info(f"DataManager initialized with {len(self._records)} entries")

    def reload(self) -> None:
        """Drop the boot flag and initialize again (forces a re-seed)."""
        with self._lock:
            self.store.reset_initialization()
            self.initialize()

    # =========================================================================
    # READS
    # =========================================================================

    def get_data(self, params: Optional[Dict[str, Any]] = None) -> List[MetricRecord]:
        """Copy of the collection, ascending by date unless params say otherwise."""
        with self._lock:
            return apply_query(self._records, params)

    def get_electricity_price(self) -> float:
        return self._price

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def _persist(self) -> bool:
        self._records.sort(key=lambda r: r.date)
        return self.store.save_records(self._records)

    def save_entry(self, record: Any) -> bool:
        """Upsert by date; a priced entry also becomes the current price."""
        entry = coerce_record(record).without_id()

        with self._lock:
            existing = next(
                (i for i, r in enumerate(self._records) if r.date == entry.date), None
            )
            if existing is not None:
                self._records[existing] = entry
            else:
                self._records.append(entry)

            success = self._persist()

            if entry.electricity_price is not None:
                self._price = entry.electricity_price
                self.store.set_price(self._price)

        return success

    def _in_range(self, index: Any) -> bool:
        return (
            isinstance(index, int)
            and not isinstance(index, bool)
            and 0 <= index < len(self._records)
        )

    def update_entry(self, index: int, record: Any) -> bool:
        """Replace the entry at a position of the date-ordered collection."""
        entry = coerce_record(record).without_id()

        with self._lock:
            if not self._in_range(index):
                self.logger.warning(f"update_entry: index {index} out of range")
                return False

            # Dates stay unique: the updated entry wins over another one on its date
            others = [
                r for i, r in enumerate(self._records)
                if i != index and r.date != entry.date
            ]
            self._records = others + [entry]
            return self._persist()

    def delete_entry(self, index: int) -> bool:
        with self._lock:
            if not self._in_range(index):
                self.logger.warning(f"delete_entry: index {index} out of range")
                return False

            del self._records[index]
            return self._persist()

    def clear_all_data(self, confirm: bool = False) -> bool:
        if not confirm:
            raise ConfirmationRequiredError("clear_all_data")

        with self._lock:
            self._records = []
            self._price = DEFAULT_ELECTRICITY_PRICE
            return self.store.clear_all()

    def set_electricity_price(self, price: float) -> bool:
        price = validate_price(price)
        with self._lock:
            self._price = price
            return self.store.set_price(price)

    # =========================================================================
    # IMPORT / EXPORT
    # =========================================================================

    def import_records(self, records: Iterable[Any], overwrite_existing: bool = False) -> bool:
        """Merge records into the collection, then re-derive the price."""
        incoming = normalize_records(coerce_record(r).without_id() for r in records)

        with self._lock:
            by_date = {r.date: r for r in self._records}
            for entry in incoming:
                if overwrite_existing or entry.date not in by_date:
                    by_date[entry.date] = entry

            self._records = list(by_date.values())
            success = self._persist()
            self._price = derive_price(self._records)
            self.store.set_price(self._price)

        self.logger.info(f"Imported {len(incoming)} records")
        return success

    def import_from_file(self) -> bool:
        """
        Replace the whole collection with the contents of a user-chosen JSON file.

        Returns:
            False when no picker is available or the user cancels

        Raises:
            MalformedPayloadError: the file is not a JSON array of valid records
        """
        if self.file_picker is None:
            self.logger.warning("import_from_file: no file picker available")
            return False

        source = self.file_picker()
        if source is None:
            self.logger.info("Import cancelled by user")
            return False

        try:
            payload = json.loads(read_import_source(source))
        except ValueError as e:
            raise MalformedPayloadError(f"Import file is not valid JSON: {e}", source="import") from e

        imported = normalize_records(r.without_id() for r in parse_records(payload, source="import"))

        with self._lock:
            self._records = imported
            success = self._persist()
            self._price = derive_price(self._records)
            self.store.set_price(self._price)

        self.logger.info(f"Imported {len(imported)} records from file")
        return success

    def export_data(self, export_format: str = "json", filename: Optional[str] = None) -> ExportPayload:
        with self._lock:
            records = list(self._records)
        return self._deliver(build_export(records, export_format, filename))
