"""
EcoMetrics backend API package
Shared connector plumbing, the remote data service and the auth client
"""

from .base_connector import APIConfig, BaseAPIConnector
from .remote_client import RemoteDataClient
from .auth_client import AuthClient

__all__ = [
    "APIConfig",
    "BaseAPIConnector",
    "RemoteDataClient",
    "AuthClient",
]
