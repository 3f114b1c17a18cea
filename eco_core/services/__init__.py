# =============================================================================
# eco_core/services/__init__.py
# Data Services
# =============================================================================

from .base_service import MetricsDataService
from .data_manager import DataManager
from .factory import create_data_service, DATA_SERVICES

__all__ = [
    "MetricsDataService",
    "DataManager",
    "create_data_service",
    "DATA_SERVICES",
]
