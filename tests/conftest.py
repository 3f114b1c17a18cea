# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import json
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest
import requests

from eco_core.api import APIConfig, RemoteDataClient
from eco_core.auth import InMemorySessionGateway, Session
from eco_core.offline import BootstrapLoader, LocalCacheStore, MemoryStorage
from eco_core.services import DataManager


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

def make_record(day: str, power=10.0, drinking=5.0, irrigation=2.0, price=25.0) -> Dict[str, Any]:
    """Record in its JSON object form"""
    return {
        "date": day,
        "powerConsumption": power,
        "drinkingWater": drinking,
        "irrigationWater": irrigation,
        "electricityPrice": price,
    }


@pytest.fixture
def sample_records() -> List[Dict[str, Any]]:
    """Three consecutive days, prices rising"""
    return [
        make_record("2024-01-01", 412.5, 1850, 0, 24.5),
        make_record("2024-01-02", 398.2, 1790, 10, 25.0),
        make_record("2024-01-03", 405.9, 1822, 0, 26.0),
    ]


@pytest.fixture
def seed_file(tmp_path, sample_records):
    """Seed dataset on disk"""
    path = tmp_path / "ecoMetrics.json"
    path.write_text(json.dumps(sample_records), encoding="utf-8")
    return path


# =============================================================================
# LOCAL CACHE FIXTURES
# =============================================================================

@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return LocalCacheStore(storage)


@pytest.fixture
def manager(store, seed_file):
    """Initialized DataManager seeded with sample_records"""
    dm = DataManager(store, BootstrapLoader(store, seed_file))
    dm.initialize()
    return dm


# =============================================================================
# HTTP FIXTURES
# =============================================================================

def make_response(status: int = 200, payload: Any = None, text: str = None) -> requests.Response:
    """Real requests.Response with a canned body"""
    response = requests.Response()
    response.status_code = status
    response.encoding = "utf-8"
    if payload is not None:
        response._content = json.dumps(payload).encode("utf-8")
    else:
        response._content = (text or "").encode("utf-8")
    return response


@pytest.fixture
def http_session():
    """Mock requests.Session; set .request.return_value / .get.return_value per test"""
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.request.return_value = make_response(200, {"success": True})
    return session


@pytest.fixture
def session_gateway():
    return InMemorySessionGateway(
        Session(token="tok-123", authenticated=True, user={"username": "ana", "role": "user"})
    )


@pytest.fixture
def api_config():
    return APIConfig(api_name="EcoMetrics API", base_url="https://api.test/api", timeout=5)


@pytest.fixture
def remote_client(api_config, session_gateway, http_session):
    return RemoteDataClient(api_config, session_gateway, http_session=http_session)


def last_request(http_session) -> Dict[str, Any]:
    """Keyword arguments of the most recent session.request call"""
    return http_session.request.call_args.kwargs
