# =============================================================================
# eco_core/offline/bootstrap.py
# First-Run Seeding of the Local Cache
# =============================================================================
"""
BootstrapLoader - populates the local cache from a static seed dataset once.

Features:
- Idempotent: an initialized cache with a readable collection is left alone
- Repairs the "boot flag set but collection missing/corrupt" state
- Seed can be a bundled JSON file or an HTTP(S) URL
- Never raises: every failure converges to an empty but initialized cache
"""

from __future__ import annotations
import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union
import logging

import requests

from eco_core.errors import (
    EcoMetricsError,
    MalformedPayloadError,
    NetworkError,
    SeedUnavailableError,
)
from eco_core.models import (
    DEFAULT_ELECTRICITY_PRICE,
    MetricRecord,
    derive_price,
    normalize_records,
    parse_records,
)
from eco_core.offline.cache_store import CollectionState, LocalCacheStore

logger = logging.getLogger(__name__)

# Seed dataset shipped with the package
DEFAULT_SEED_PATH = Path(__file__).parent.parent / "resources" / "ecoMetrics.json"


class BootstrapStatus(Enum):
    """Outcome of a bootstrap run."""
    SKIPPED = "skipped"     # Already initialized
    SEEDED = "seeded"       # Seed dataset loaded
    EMPTY = "empty"         # Seed unavailable/malformed, initialized empty


@dataclass
class BootstrapResult:
    status: BootstrapStatus
    record_count: int = 0
    price: float = DEFAULT_ELECTRICITY_PRICE
    repaired: bool = False
    reason: Optional[str] = None


class BootstrapLoader:
    """
    Seeds a LocalCacheStore exactly once per storage medium.

    Usage:
        loader = BootstrapLoader(store, "https://example.org/data/ecoMetrics.json")
        result = loader.run()
    """

    def __init__(
        self,
        store: LocalCacheStore,
        seed_source: Union[str, Path] = DEFAULT_SEED_PATH,
        timeout: float = 30.0,
        http_session: Optional[requests.Session] = None,
    ):
        self.store = store
        self.seed_source = seed_source
        self.timeout = timeout
        self.http_session = http_session or requests.Session()

    @property
    def _is_remote_seed(self) -> bool:
        return str(self.seed_source).lower().startswith(("http://", "https://"))

    def run(self) -> BootstrapResult:
        """Seed the cache if needed. Always leaves the cache initialized."""
        repaired = False

        if self.store.is_initialized():
            state = self.store.collection_state()
            if state is CollectionState.PRESENT:
                logger.debug("Local cache already initialized, skipping seed")
                return BootstrapResult(
                    status=BootstrapStatus.SKIPPED,
                    record_count=len(self.store.load_records()),
                    price=self.store.get_price(),
                )

            logger.warning(
                f"Boot flag is set but the record collection is {state.value}; re-seeding"
            )
            self.store.reset_initialization()
            repaired = True

        logger.info(f"Seeding local cache from {self.seed_source}")
        try:
            records = normalize_records(self._fetch_seed())
        except EcoMetricsError as e:
            logger.warning(f"Seed dataset unavailable ({e}), initializing with empty data")
            return self._initialize_empty(str(e.message), repaired)

        if not self.store.save_records(records):
            return self._initialize_empty("seed dataset could not be persisted", repaired)

        price = derive_price(records)
        self.store.set_price(price)
        self.store.mark_initialized()

        if records:
            logger.info(
                f"Loaded {len(records)} seed records "
                f"({records[0].date} to {records[-1].date}), price {price}"
            )
        else:
            logger.info("Seed dataset is empty")

        return BootstrapResult(
            status=BootstrapStatus.SEEDED,
            record_count=len(records),
            price=price,
            repaired=repaired,
        )

    def _initialize_empty(self, reason: str, repaired: bool) -> BootstrapResult:
        self.store.save_records([])
        self.store.set_price(DEFAULT_ELECTRICITY_PRICE)
        self.store.mark_initialized()
        logger.info("Local cache initialized with empty data")
        return BootstrapResult(
            status=BootstrapStatus.EMPTY,
            repaired=repaired,
            reason=reason,
        )

    def _fetch_seed(self) -> List[MetricRecord]:
        source = str(self.seed_source)
        if self._is_remote_seed:
            payload = self._fetch_remote(source)
        else:
            payload = self._read_file(Path(self.seed_source))
        return parse_records(payload, source=source)

    def _fetch_remote(self, url: str):
        try:
            response = self.http_session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Seed request failed: {e}", url=url) from e

        if not response.ok:
            raise SeedUnavailableError(
                f"Seed request returned {response.status_code}",
                source=url,
                status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedPayloadError(f"Seed is not valid JSON: {e}", source=url) from e

    def _read_file(self, path: Path):
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SeedUnavailableError(f"Cannot read seed file: {e}", source=str(path)) from e
        except UnicodeDecodeError as e:
            raise MalformedPayloadError(f"Seed is not UTF-8 text: {e}", source=str(path)) from e

        try:
            return json.loads(text)
        except ValueError as e:
            raise MalformedPayloadError(f"Seed is not valid JSON: {e}", source=str(path)) from e
