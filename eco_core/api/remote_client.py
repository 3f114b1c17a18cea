"""
Remote Data Client
Backend-backed variant of the data service: every operation is an HTTP round trip
"""
from typing import Any, Dict, Iterable, List, Optional
import logging

import requests

from eco_core.auth.session import SessionGateway
from eco_core.data.io import Downloader, ExportPayload, build_export
from eco_core.errors import ConfirmationRequiredError, EcoMetricsError, MalformedPayloadError
from eco_core.models import DEFAULT_ELECTRICITY_PRICE, MetricRecord, coerce_record, parse_records
from eco_core.services.base_service import MetricsDataService

from .base_connector import APIConfig, BaseAPIConnector

logger = logging.getLogger(__name__)


class RemoteDataClient(BaseAPIConnector, MetricsDataService):
    """
    Data service against the authoritative backend store.

    Failures are raised (RemoteAPIError, AuthError, NetworkError,
    MalformedPayloadError) for the caller to report or retry; only the price
    lookup falls back to a default.
    """

    mode = "remote"

    def __init__(
        self,
        config: APIConfig,
        session_gateway: Optional[SessionGateway] = None,
        downloader: Optional[Downloader] = None,
        http_session: Optional[requests.Session] = None,
    ):
        BaseAPIConnector.__init__(self, config, session_gateway, http_session)
        MetricsDataService.__init__(self, downloader=downloader)

    def initialize(self) -> None:
        # The backend holds the data; nothing to prepare locally
        logger.info(f"Remote data client ready ({self.config.base_url})")

    @staticmethod
    def _success(response: Any) -> bool:
        return bool(isinstance(response, dict) and response.get("success"))

    @staticmethod
    def _body(record: Any) -> Dict[str, Any]:
        body = coerce_record(record).to_dict()
        body.pop("id", None)
        return body

    # =========================================================================
    # CRUD
    # =========================================================================

    def get_data(self, params: Optional[Dict[str, Any]] = None) -> List[MetricRecord]:
        """
        Fetch records

        Args:
            params: Query parameters (limit, sortBy, sortOrder, filters)

        Returns:
            Validated records (with their backend ids)
        """
        response = self._make_request("/data", "GET", params=params)
        if not isinstance(response, dict):
            raise MalformedPayloadError("GET /data did not return an object", source="/data")

        data = response.get("data") or {}
        if not isinstance(data, dict):
            raise MalformedPayloadError("GET /data returned no records object", source="/data")
        return parse_records(data.get("records") or [], source="/data")

    def save_entry(self, record: Any) -> bool:
        return self._success(self._make_request("/data", "POST", data=self._body(record)))

    def update_entry(self, record_id: Any, record: Any) -> bool:
        return self._success(
            self._make_request(f"/data/{record_id}", "PUT", data=self._body(record))
        )

    def delete_entry(self, record_id: Any) -> bool:
        return self._success(self._make_request(f"/data/{record_id}", "DELETE"))

    def clear_all_data(self, confirm: bool = False) -> bool:
        """Wipe every record on the backend. The request always carries confirm: true."""
        if not confirm:
            raise ConfirmationRequiredError("clear_all_data")
        return self._success(self._make_request("/data", "DELETE", data={"confirm": True}))

    def import_records(self, records: Iterable[Any], overwrite_existing: bool = False) -> bool:
        body = {
            "records": [self._body(r) for r in records],
            "overwriteExisting": overwrite_existing,
        }
        return self._success(self._make_request("/data/import", "POST", data=body))

    # =========================================================================
    # EXPORT / LOGS / PRICE
    # =========================================================================

    def export_data(
        self,
        export_format: str = "json",
        filename: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ExportPayload:
        """
        Export through the backend

        JSON downloads the returned payload as-is; CSV converts the returned
        records client-side.
        """
        query = {"format": export_format, "filename": filename}
        query.update(params or {})
        response = self._make_request("/data/export", "GET", params=query)

        if export_format == "json":
            content = response
            if isinstance(response, dict) and response.get("data") is not None:
                content = response["data"]
            payload = build_export([], "json", filename, json_payload=content)
        else:
            records: List[Any] = []
            if isinstance(response, dict):
                data = response.get("data")
                records = (data.get("records") if isinstance(data, dict) else None) \
                    or response.get("records") or []
            payload = build_export(records, export_format, filename)

        return self._deliver(payload)

    def get_logs(self, params: Optional[Dict[str, Any]] = None) -> Any:
        """Operation logs (admin only; the backend answers 403 otherwise)"""
        response = self._make_request("/logs", "GET", params=params)
        return response.get("data") if isinstance(response, dict) else None

    def get_electricity_price(self) -> float:
        """Price of the most recent record; the default on any failure"""
        try:
            latest = self.get_data({"limit": 1, "sortBy": "date", "sortOrder": "desc"})
        except EcoMetricsError as e:
            logger.error(f"Failed to get electricity price: {e}")
            return DEFAULT_ELECTRICITY_PRICE

        if latest and latest[0].electricity_price is not None:
            return latest[0].electricity_price
        return DEFAULT_ELECTRICITY_PRICE
