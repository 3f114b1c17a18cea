# =============================================================================
# eco_core/services/factory.py
# Selects the data service variant at construction time
# =============================================================================

from __future__ import annotations
from typing import Callable, Dict, Optional

from eco_core.auth.session import SessionGateway
from eco_core.config import Settings
from eco_core.data.io import Downloader
from eco_core.errors import ConfigurationError
from eco_core.logging import get_logger
from eco_core.services.base_service import MetricsDataService

logger = get_logger(__name__)


def _build_local(settings, session_gateway, downloader, file_picker) -> MetricsDataService:
    """Local cache backed DataManager."""
    from eco_core.offline.bootstrap import BootstrapLoader
    from eco_core.offline.cache_store import LocalCacheStore
    from eco_core.offline.storage import SQLiteStorage
    from eco_core.services.data_manager import DataManager

    store = LocalCacheStore(SQLiteStorage(settings.storage_path))
    loader = BootstrapLoader(store, settings.seed_source, timeout=settings.request_timeout)
    return DataManager(store, loader, downloader=downloader, file_picker=file_picker)


def _build_remote(settings, session_gateway, downloader, file_picker) -> MetricsDataService:
    """Backend backed RemoteDataClient."""
    from eco_core.api.base_connector import APIConfig
    from eco_core.api.remote_client import RemoteDataClient

    config = APIConfig(
        api_name="EcoMetrics API",
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
    )
    return RemoteDataClient(config, session_gateway, downloader=downloader)


# Registry of available data services
DATA_SERVICES: Dict[str, Callable[..., MetricsDataService]] = {
    "local": _build_local,
    "remote": _build_remote,
}


def create_data_service(
    settings: Settings,
    session_gateway: Optional[SessionGateway] = None,
    downloader: Optional[Downloader] = None,
    file_picker: Optional[Callable] = None,
) -> MetricsDataService:
    """
    Construct the data service for ``settings.mode``.

    Raises:
        ConfigurationError: unknown mode
    """
    builder = DATA_SERVICES.get(settings.mode)
    if builder is None:
        raise ConfigurationError(
            f"Unknown data mode '{settings.mode}'",
            config_key="mode",
            expected_type=" | ".join(DATA_SERVICES),
        )

    service = builder(settings, session_gateway, downloader, file_picker)
    logger.info(f"Created {service.__class__.__name__} ({settings.mode} mode)")
    return service
