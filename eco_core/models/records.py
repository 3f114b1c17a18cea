# =============================================================================
# eco_core/models/records.py
# MetricRecord Schema, Validation and Collection Helpers
# =============================================================================
"""
MetricRecord - one date-keyed measurement of power and water usage.

Records travel as plain JSON objects (local cache, seed file, import files and
the REST API all use the same camelCase shape). Everything that crosses one of
those boundaries goes through ``MetricRecord.from_dict`` / ``parse_records`` so
the rest of the code only ever sees validated, immutable records.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from eco_core.errors import MalformedPayloadError, RecordValidationError

DEFAULT_ELECTRICITY_PRICE = 25.0

# Wire (camelCase) name -> attribute name
FIELD_MAP = {
    "date": "date",
    "powerConsumption": "power_consumption",
    "drinkingWater": "drinking_water",
    "irrigationWater": "irrigation_water",
    "electricityPrice": "electricity_price",
}

USAGE_FIELDS = ("powerConsumption", "drinkingWater", "irrigationWater")


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise RecordValidationError(
        "date must be an ISO calendar date (YYYY-MM-DD)",
        field="date",
        value=value,
    )


def _parse_number(field: str, value: Any) -> float:
    if isinstance(value, bool) or value is None:
        raise RecordValidationError(f"{field} must be a number", field=field, value=value)

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise RecordValidationError(f"{field} must be a number", field=field, value=value)

    if math.isnan(number) or math.isinf(number):
        raise RecordValidationError(f"{field} must be finite", field=field, value=value)
    return number


def validate_price(value: Any, field: str = "electricityPrice") -> float:
    """Parse a unit price, which must be a finite number greater than zero."""
    price = _parse_number(field, value)
    if price <= 0:
        raise RecordValidationError(f"{field} must be greater than 0", field=field, value=value)
    return price


@dataclass(frozen=True)
class MetricRecord:
    """One entry per calendar date."""
    date: date
    power_consumption: float
    drinking_water: float
    irrigation_water: float
    electricity_price: Optional[float] = None
    record_id: Optional[Any] = None  # Assigned by the remote store

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MetricRecord:
        """
        Build a record from its JSON object form.

        Raises:
            RecordValidationError: missing field, wrong type or out-of-range value
        """
        if not isinstance(data, Mapping):
            raise RecordValidationError(
                f"record must be an object, got {type(data).__name__}",
                value=data,
            )

        missing = [name for name in ("date",) + USAGE_FIELDS if name not in data]
        if missing:
            raise RecordValidationError(
                f"record is missing required field(s): {', '.join(missing)}",
                field=missing[0],
            )

        values: Dict[str, Any] = {"date": _parse_date(data["date"])}

        for name in USAGE_FIELDS:
            number = _parse_number(name, data[name])
            if number < 0:
                raise RecordValidationError(f"{name} must be >= 0", field=name, value=data[name])
            values[FIELD_MAP[name]] = number

        price = data.get("electricityPrice")
        values["electricity_price"] = None if price in (None, "") else validate_price(price)
        values["record_id"] = data.get("id")

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """JSON object form (camelCase keys, ISO date)."""
        data: Dict[str, Any] = {
            "date": self.date.isoformat(),
            "powerConsumption": self.power_consumption,
            "drinkingWater": self.drinking_water,
            "irrigationWater": self.irrigation_water,
            "electricityPrice": self.electricity_price,
        }
        if self.record_id is not None:
            data["id"] = self.record_id
        return data

    def without_id(self) -> MetricRecord:
        return replace(self, record_id=None)


def coerce_record(record: Any) -> MetricRecord:
    """Accept either a MetricRecord or its JSON object form."""
    if isinstance(record, MetricRecord):
        return record
    return MetricRecord.from_dict(record)


def parse_records(payload: Any, source: Optional[str] = None) -> List[MetricRecord]:
    """
    Validate a JSON payload that must be an array of record objects.

    Raises:
        MalformedPayloadError: payload is not a list, or an entry is not a valid record
    """
    if not isinstance(payload, list):
        raise MalformedPayloadError(
            f"expected a JSON array of records, got {type(payload).__name__}",
            source=source,
        )

    records = []
    for index, item in enumerate(payload):
        try:
            records.append(MetricRecord.from_dict(item))
        except RecordValidationError as e:
            raise MalformedPayloadError(
                f"invalid record at index {index}: {e.message}",
                source=source,
                index=index,
                details=dict(e.details),
            ) from e
    return records


def normalize_records(records: Iterable[MetricRecord]) -> List[MetricRecord]:
    """Sort ascending by date; a duplicated date keeps its last occurrence."""
    by_date: Dict[date, MetricRecord] = {}
    for record in records:
        by_date[record.date] = record
    return sorted(by_date.values(), key=lambda r: r.date)


def derive_price(records: List[MetricRecord]) -> float:
    """Price of the last record, or the default when there is none."""
    if not records:
        return DEFAULT_ELECTRICITY_PRICE
    return records[-1].electricity_price or DEFAULT_ELECTRICITY_PRICE


def apply_query(
    records: List[MetricRecord],
    params: Optional[Mapping[str, Any]] = None,
) -> List[MetricRecord]:
    """
    Filter/sort/limit a record list with the same query parameters the
    backend understands for ``GET /data``.

    Supported params: sortBy, sortOrder ("asc"/"desc"), limit, startDate, endDate.
    """
    result = list(records)
    if not params:
        return result

    start = params.get("startDate")
    end = params.get("endDate")
    if start:
        start_date = _parse_date(start)
        result = [r for r in result if r.date >= start_date]
    if end:
        end_date = _parse_date(end)
        result = [r for r in result if r.date <= end_date]

    sort_by = params.get("sortBy") or "date"
    attribute = FIELD_MAP.get(sort_by)
    if attribute is None:
        raise RecordValidationError(f"cannot sort by unknown field '{sort_by}'", field="sortBy")
    descending = str(params.get("sortOrder", "asc")).lower() == "desc"

    def sort_key(record: MetricRecord):
        value = getattr(record, attribute)
        # Records without a price sort after priced ones
        return (value is None, value if value is not None else 0)

    result.sort(key=sort_key, reverse=descending)

    limit = params.get("limit")
    if limit is not None:
        result = result[: max(int(limit), 0)]
    return result
