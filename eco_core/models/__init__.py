# =============================================================================
# eco_core/models/__init__.py
# Record Schema
# =============================================================================

from .records import (
    DEFAULT_ELECTRICITY_PRICE,
    MetricRecord,
    coerce_record,
    parse_records,
    normalize_records,
    derive_price,
    apply_query,
    validate_price,
)

__all__ = [
    "DEFAULT_ELECTRICITY_PRICE",
    "MetricRecord",
    "coerce_record",
    "parse_records",
    "normalize_records",
    "derive_price",
    "apply_query",
    "validate_price",
]
