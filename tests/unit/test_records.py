# =============================================================================
# tests/unit/test_records.py
# Unit Tests for the MetricRecord schema and collection helpers
# =============================================================================

from datetime import date

import pytest

from conftest import make_record
from eco_core.errors import MalformedPayloadError, RecordValidationError
from eco_core.models import (
    DEFAULT_ELECTRICITY_PRICE,
    MetricRecord,
    apply_query,
    derive_price,
    normalize_records,
    parse_records,
)


class TestMetricRecordValidation:
    """Parse-boundary validation"""

    def test_from_dict_valid(self):
        record = MetricRecord.from_dict(make_record("2024-01-02", 10, 5, 2, 30))

        assert record.date == date(2024, 1, 2)
        assert record.power_consumption == 10.0
        assert record.drinking_water == 5.0
        assert record.irrigation_water == 2.0
        assert record.electricity_price == 30.0
        assert record.record_id is None

    def test_to_dict_uses_wire_names(self):
        data = MetricRecord.from_dict(make_record("2024-01-02", 10, 5, 2, 30)).to_dict()

        assert data == {
            "date": "2024-01-02",
            "powerConsumption": 10.0,
            "drinkingWater": 5.0,
            "irrigationWater": 2.0,
            "electricityPrice": 30.0,
        }

    def test_id_is_kept(self):
        data = make_record("2024-01-02")
        data["id"] = 42

        record = MetricRecord.from_dict(data)

        assert record.record_id == 42
        assert record.to_dict()["id"] == 42
        assert "id" not in record.without_id().to_dict()

    def test_numeric_strings_accepted(self):
        record = MetricRecord.from_dict(make_record("2024-01-02", "12.5", "3", "0", "27.1"))

        assert record.power_consumption == 12.5
        assert record.electricity_price == 27.1

    @pytest.mark.parametrize("price", [None, ""])
    def test_price_is_optional(self, price):
        record = MetricRecord.from_dict(make_record("2024-01-02", price=price))
        assert record.electricity_price is None

    def test_missing_field_rejected(self):
        data = make_record("2024-01-02")
        del data["drinkingWater"]

        with pytest.raises(RecordValidationError) as exc:
            MetricRecord.from_dict(data)

        assert exc.value.details["field"] == "drinkingWater"

    @pytest.mark.parametrize("field,value", [
        ("powerConsumption", -1),
        ("drinkingWater", "lots"),
        ("irrigationWater", True),
        ("irrigationWater", float("nan")),
        ("electricityPrice", 0),
        ("electricityPrice", -3),
        ("date", "02/01/2024"),
        ("date", 20240102),
    ])
    def test_invalid_values_rejected(self, field, value):
        data = make_record("2024-01-02")
        data[field] = value

        with pytest.raises(RecordValidationError) as exc:
            MetricRecord.from_dict(data)

        assert exc.value.details["field"] == field

    def test_number_too_large_for_float_rejected(self):
        data = make_record("2024-01-02")
        data["powerConsumption"] = 10 ** 400

        with pytest.raises(RecordValidationError) as exc:
            MetricRecord.from_dict(data)

        assert exc.value.details["field"] == "powerConsumption"

    def test_non_mapping_rejected(self):
        with pytest.raises(RecordValidationError):
            MetricRecord.from_dict(["2024-01-02", 1, 2, 3])

    def test_records_are_immutable(self):
        record = MetricRecord.from_dict(make_record("2024-01-02"))
        with pytest.raises(AttributeError):
            record.power_consumption = 99


class TestParseRecords:

    def test_non_list_payload(self):
        with pytest.raises(MalformedPayloadError):
            parse_records({"records": []})

    def test_bad_entry_reports_index(self):
        payload = [make_record("2024-01-01"), {"date": "2024-01-02"}]

        with pytest.raises(MalformedPayloadError) as exc:
            parse_records(payload, source="seed")

        assert exc.value.details["index"] == 1
        assert exc.value.details["source"] == "seed"

    def test_empty_list(self):
        assert parse_records([]) == []


class TestCollectionHelpers:

    def test_normalize_sorts_and_dedupes(self):
        records = parse_records([
            make_record("2024-01-03", power=3),
            make_record("2024-01-01", power=1),
            make_record("2024-01-03", power=33),
        ])

        result = normalize_records(records)

        assert [r.date.isoformat() for r in result] == ["2024-01-01", "2024-01-03"]
        assert result[-1].power_consumption == 33

    def test_derive_price_from_last_record(self):
        records = parse_records([make_record("2024-01-01", price=20), make_record("2024-01-02", price=31)])
        assert derive_price(records) == 31

    def test_derive_price_defaults(self):
        assert derive_price([]) == DEFAULT_ELECTRICITY_PRICE
        assert derive_price(parse_records([make_record("2024-01-01", price=None)])) == DEFAULT_ELECTRICITY_PRICE

    def test_apply_query_latest(self):
        records = normalize_records(parse_records([
            make_record("2024-01-01", price=20),
            make_record("2024-01-03", price=22),
            make_record("2024-01-02", price=21),
        ]))

        latest = apply_query(records, {"limit": 1, "sortBy": "date", "sortOrder": "desc"})

        assert len(latest) == 1
        assert latest[0].electricity_price == 22

    def test_apply_query_date_range(self):
        records = normalize_records(parse_records([
            make_record("2024-01-01"), make_record("2024-01-02"), make_record("2024-01-03"),
        ]))

        result = apply_query(records, {"startDate": "2024-01-02", "endDate": "2024-01-02"})

        assert [r.date.isoformat() for r in result] == ["2024-01-02"]

    def test_apply_query_unknown_field(self):
        with pytest.raises(RecordValidationError):
            apply_query([], {"sortBy": "colour"})

    def test_apply_query_returns_new_list(self):
        records = parse_records([make_record("2024-01-01")])
        assert apply_query(records) is not records
