# =============================================================================
# tests/unit/test_io.py
# Unit Tests for export/import helpers
# =============================================================================

import io
import json
from datetime import date

import pytest

from conftest import make_record
from eco_core.data import (
    CSV_HEADERS,
    FileDownloader,
    build_export,
    default_filename,
    read_import_source,
    records_to_csv,
    records_to_dataframe,
)
from eco_core.models import parse_records


class TestExport:

    def test_default_filename(self):
        assert default_filename("csv", date(2024, 3, 9)) == "ecoMetrics_2024-03-09.csv"

    def test_csv_header_and_rows(self):
        records = parse_records([make_record("2024-01-01", 1.5, 2, 3, 25)])

        lines = records_to_csv(records).split("\n")

        assert lines[0] == ",".join(CSV_HEADERS)
        assert lines[1] == "2024-01-01,1.5,2,3,25"

    def test_csv_keeps_fractions_and_blanks_missing_price(self):
        records = parse_records([make_record("2024-01-01", 12.25, 0, 7, None)])

        assert records_to_csv(records).split("\n")[1] == "2024-01-01,12.25,0,7,"

    def test_csv_empty(self):
        assert records_to_csv([]) == ""

    def test_dataframe_columns(self):
        df = records_to_dataframe(parse_records([make_record("2024-01-01")]))
        assert list(df.columns) == CSV_HEADERS

    def test_json_export_is_indented(self):
        payload = build_export(parse_records([make_record("2024-01-01")]), "json", "out.json")

        assert payload.mime_type == "application/json"
        assert payload.content.startswith("[\n  {")
        assert json.loads(payload.content)[0]["date"] == "2024-01-01"

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            build_export([], "xml")

    def test_file_downloader(self, tmp_path):
        payload = build_export([], "json", "empty.json")

        target = FileDownloader(tmp_path / "exports")(payload)

        assert target.read_text() == "[]"


class TestImportSource:

    def test_path(self, tmp_path):
        path = tmp_path / "in.json"
        path.write_text("[]")

        assert read_import_source(path) == "[]"
        assert read_import_source(str(path)) == "[]"

    def test_raw_content(self):
        assert read_import_source(b"[1]") == "[1]"
        assert read_import_source('  [{"a": 1}]') == '  [{"a": 1}]'

    def test_uploaded_file(self):
        assert read_import_source(io.BytesIO(b"[]")) == "[]"

    def test_unsupported(self):
        with pytest.raises(TypeError):
            read_import_source(42)
