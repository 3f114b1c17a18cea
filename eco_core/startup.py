# =============================================================================
# eco_core/startup.py
# Application Startup
# =============================================================================
"""
Builds the data service once per application session and initializes it.

Startup never fails: whatever goes wrong, the caller gets a usable (possibly
empty) service and a ``startup_notice`` to show the user once the page renders.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional

from eco_core.auth.session import InMemorySessionGateway, SessionGateway
from eco_core.config import Settings, load_settings
from eco_core.data.io import Downloader
from eco_core.logging import get_logger, LogContext
from eco_core.services.base_service import MetricsDataService
from eco_core.services.factory import create_data_service

logger = get_logger(__name__)

STARTUP_NOTICE = (
    "Data initialization ran into a problem, but the application is still usable. "
    "See the log for details."
)


@dataclass
class AppContext:
    """Everything the host page needs, created once at startup."""
    settings: Settings
    session_gateway: SessionGateway
    data_service: MetricsDataService
    startup_notice: Optional[str] = None


def _log_summary(service: MetricsDataService) -> None:
    if service.mode != "local":
        return
    records = service.get_data()
    logger.info(f"Records loaded: {len(records)}")
    logger.info(f"Current electricity price: {service.get_electricity_price()} KZT/kWh")
    if records:
        logger.info(f"Date range: {records[0].date} to {records[-1].date}")
    else:
        logger.warning("No records loaded; the seed dataset may be missing")


def initialize_app(
    settings: Optional[Settings] = None,
    session_gateway: Optional[SessionGateway] = None,
    downloader: Optional[Downloader] = None,
    file_picker: Optional[Callable] = None,
) -> AppContext:
    """
    Create and initialize the application's data service.

    Falls back to a local service with default settings if the configured one
    cannot be built.
    """
    session_gateway = session_gateway or InMemorySessionGateway()
    notice = None

    try:
        settings = settings or load_settings()
        service = create_data_service(settings, session_gateway, downloader, file_picker)
    except Exception as e:
        # Bad configuration must not keep the page from rendering
        logger.error(f"Application setup failed, using defaults: {e}", exc_info=True)
        settings = Settings()
        service = create_data_service(settings, session_gateway, downloader, file_picker)
        notice = STARTUP_NOTICE

    try:
        with LogContext(logger, "Initializing application data"):
            service.initialize()
            _log_summary(service)
        if service.init_error:
            notice = STARTUP_NOTICE
    except Exception as e:
        logger.error(f"Application initialization failed: {e}", exc_info=True)
        notice = STARTUP_NOTICE

    return AppContext(
        settings=settings,
        session_gateway=session_gateway,
        data_service=service,
        startup_notice=notice,
    )
