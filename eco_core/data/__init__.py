# =============================================================================
# eco_core/data/__init__.py
# Export / Import I/O
# =============================================================================

from .io import (
    CSV_HEADERS,
    ExportPayload,
    Downloader,
    FileDownloader,
    build_export,
    default_filename,
    read_import_source,
    records_to_csv,
    records_to_dataframe,
    records_to_json,
)

__all__ = [
    "CSV_HEADERS",
    "ExportPayload",
    "Downloader",
    "FileDownloader",
    "build_export",
    "default_filename",
    "read_import_source",
    "records_to_csv",
    "records_to_dataframe",
    "records_to_json",
]
