# =============================================================================
# eco_core/data/io.py — Export/import helpers for metric records
# =============================================================================
from __future__ import annotations
import json
import math
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
import logging

import pandas as pd

from eco_core.models import MetricRecord

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Date",
    "Power Consumption (kWh)",
    "Drinking Water (L)",
    "Irrigation Water (L)",
    "Electricity Price (KZT/kWh)",
]

# Record attribute -> CSV/DataFrame column
COLUMN_MAP = {
    "date": "Date",
    "powerConsumption": "Power Consumption (kWh)",
    "drinkingWater": "Drinking Water (L)",
    "irrigationWater": "Irrigation Water (L)",
    "electricityPrice": "Electricity Price (KZT/kWh)",
}

MIME_TYPES = {
    "json": "application/json",
    "csv": "text/csv",
}


@dataclass
class ExportPayload:
    """A file ready to be handed to the user."""
    filename: str
    content: str
    mime_type: str

    @property
    def data(self) -> bytes:
        return self.content.encode("utf-8")


Downloader = Callable[[ExportPayload], Any]


def default_filename(export_format: str, today: Optional[date] = None) -> str:
    """ecoMetrics_YYYY-MM-DD.<ext>"""
    today = today or date.today()
    return f"ecoMetrics_{today.isoformat()}.{export_format}"


def _as_dicts(records: List[Union[MetricRecord, Dict[str, Any]]]) -> List[Dict[str, Any]]:
    return [r.to_dict() if isinstance(r, MetricRecord) else dict(r) for r in records]


def records_to_dataframe(records: List[Union[MetricRecord, Dict[str, Any]]]) -> pd.DataFrame:
    """Records as a DataFrame with the display column names, in list order."""
    rows = _as_dicts(records)
    df = pd.DataFrame(rows, columns=list(COLUMN_MAP.keys()))
    return df.rename(columns=COLUMN_MAP)


def records_to_json(payload: Any) -> str:
    """Pretty-printed JSON (2-space indent) of records or an arbitrary API payload."""
    if isinstance(payload, list):
        payload = _as_dicts(payload)
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _format_number(value: Any) -> Any:
    """Whole numbers without a trailing .0, missing values as empty cells."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return value


def records_to_csv(records: List[Union[MetricRecord, Dict[str, Any]]]) -> str:
    """CSV with the fixed header row; an empty collection gives an empty string."""
    if not records:
        return ""
    df = records_to_dataframe(records)
    numeric_columns = CSV_HEADERS[1:]
    df[numeric_columns] = df[numeric_columns].apply(lambda column: column.map(_format_number))
    return df.to_csv(index=False, header=CSV_HEADERS, lineterminator="\n").rstrip("\n")


def build_export(
    records: List[Union[MetricRecord, Dict[str, Any]]],
    export_format: str = "json",
    filename: Optional[str] = None,
    json_payload: Any = None,
) -> ExportPayload:
    """
    Serialize records for download.

    Args:
        records: Records to export
        export_format: "json" or "csv"
        filename: Custom filename (default: ecoMetrics_YYYY-MM-DD.<ext>)
        json_payload: For JSON, export this object instead of the records
    """
    export_format = export_format.lower()
    if export_format == "json":
        content = records_to_json(records if json_payload is None else json_payload)
    elif export_format == "csv":
        content = records_to_csv(records)
    else:
        raise ValueError(f"Unsupported export format '{export_format}' (use 'json' or 'csv')")

    return ExportPayload(
        filename=filename or default_filename(export_format),
        content=content,
        mime_type=MIME_TYPES[export_format],
    )


def read_import_source(source: Any) -> str:
    """
    Text of a file chosen for import.

    Accepts a filesystem path, raw bytes/str content, or an uploaded-file object
    exposing ``getvalue()`` (e.g. Streamlit's UploadedFile).
    """
    if isinstance(source, Path):
        return source.read_text(encoding="utf-8")
    if isinstance(source, bytes):
        return source.decode("utf-8")
    if isinstance(source, str):
        # Raw JSON text, otherwise a path
        if source.lstrip().startswith(("[", "{")):
            return source
        return Path(source).read_text(encoding="utf-8")
    if hasattr(source, "getvalue"):
        value = source.getvalue()
        return value.decode("utf-8") if isinstance(value, bytes) else value
    raise TypeError(f"Cannot read import source of type {type(source).__name__}")


class FileDownloader:
    """Writes export payloads into a directory (the non-browser 'download')."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def __call__(self, payload: ExportPayload) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / payload.filename
        target.write_text(payload.content, encoding="utf-8")
        logger.info(f"Exported {payload.filename} to {self.directory}")
        return target
