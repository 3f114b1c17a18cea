# =============================================================================
# eco_core/services/base_service.py
# Common Interface of the Local and Remote Data Services
# =============================================================================

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from eco_core.data.io import Downloader, ExportPayload
from eco_core.logging import get_logger, LogContext
from eco_core.models import MetricRecord


class MetricsDataService(ABC):
    """
    Operation set shared by every data service variant.

    The application talks to exactly one instance, chosen at startup:
    - DataManager: local cache backed, offline-first
    - RemoteDataClient: every operation is a round trip to the backend

    ``update_entry``/``delete_entry`` take the variant's record key: a list
    position for the local cache, the record id for the backend.

    Usage:
        service = create_data_service(settings, session_gateway)
        service.initialize()
        service.save_entry({"date": "2024-01-02", ...})
    """

    mode: str = ""

    def __init__(self, downloader: Optional[Downloader] = None):
        self.logger = get_logger(self.__class__.__name__)
        self.downloader = downloader
        # Set when initialize() had to fall back to an empty state
        self.init_error: Optional[str] = None

    def log_operation(self, operation: str) -> LogContext:
        """
        Create a logging context for an operation.

        Usage:
            with self.log_operation("Importing records"):
                ...
        """
        return LogContext(self.logger, operation)

    def _deliver(self, payload: ExportPayload) -> ExportPayload:
        """Hand an export to the downloader, if one is configured"""
        if self.downloader is not None:
            self.downloader(payload)
        return payload

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the service; must not raise."""

    @abstractmethod
    def get_data(self, params: Optional[Dict[str, Any]] = None) -> List[MetricRecord]:
        """Records ordered by date (or as requested by params)."""

    @abstractmethod
    def save_entry(self, record: Any) -> bool:
        """Create the record, or replace the one with the same date."""

    @abstractmethod
    def update_entry(self, key: Any, record: Any) -> bool:
        """Replace the record identified by key."""

    @abstractmethod
    def delete_entry(self, key: Any) -> bool:
        """Remove the record identified by key."""

    @abstractmethod
    def clear_all_data(self, confirm: bool = False) -> bool:
        """Remove every record. Raises ConfirmationRequiredError unless confirm=True."""

    @abstractmethod
    def import_records(self, records: Iterable[Any], overwrite_existing: bool = False) -> bool:
        """Bulk-add records; existing dates are replaced only when overwrite_existing."""

    @abstractmethod
    def export_data(self, export_format: str = "json", filename: Optional[str] = None) -> ExportPayload:
        """Serialize the records and hand them to the downloader."""

    @abstractmethod
    def get_electricity_price(self) -> float:
        """Current unit price."""
