"""
Base API Connector Class for the EcoMetrics backend
Provides the shared HTTP plumbing (session, auth headers, error normalization)
"""
from typing import Optional, Dict, Any
from dataclasses import dataclass
import logging

import requests

from eco_core.auth.session import SessionGateway, InMemorySessionGateway, auth_headers
from eco_core.errors import AuthError, MalformedPayloadError, NetworkError, RemoteAPIError

logger = logging.getLogger(__name__)


@dataclass
class APIConfig:
    """Configuration for API connection"""
    api_name: str
    base_url: str
    timeout: float = 30.0
    headers: Optional[Dict[str, str]] = None


class BaseAPIConnector:
    """Base class for connectors talking JSON to the EcoMetrics backend"""

    def __init__(
        self,
        config: APIConfig,
        session_gateway: Optional[SessionGateway] = None,
        http_session: Optional[requests.Session] = None,
    ):
        self.config = config
        self.session_gateway = session_gateway or InMemorySessionGateway()
        self.session = http_session or requests.Session()

        # Set default headers
        if config.headers:
            self.session.headers.update(config.headers)

    def _build_headers(self) -> Dict[str, str]:
        """Content-Type plus the bearer token of the current session, if any"""
        return auth_headers(self.session_gateway.get_session())

    @staticmethod
    def _clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Drop query parameters whose value is None"""
        return {k: v for k, v in (params or {}).items() if v is not None}

    def _make_request(
        self,
        endpoint: str,
        method: str = "GET",
        params: Optional[Dict] = None,
        data: Optional[Any] = None,
        default_error: Optional[str] = None,
    ) -> Any:
        """
        Make HTTP request with error handling

        Args:
            endpoint: API endpoint (appended to base_url, e.g. "/data")
            method: HTTP method (GET, POST, PUT, DELETE)
            params: Query parameters; None values are dropped
            data: JSON request body (sent for POST, PUT and DELETE)
            default_error: Message used when the server gives none
                (default: "API Error: <status>")

        Returns:
            Decoded JSON response body ({} for an empty body)

        Raises:
            AuthError: 401/403 response
            RemoteAPIError: any other non-success status
            NetworkError: transport failure or timeout
            MalformedPayloadError: success response that is not JSON
        """
        url = f"{self.config.base_url.rstrip('/')}{endpoint}"
        method = method.upper()

        body = data if data is not None and method in ("POST", "PUT", "DELETE") else None

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=self._clean_params(params) or None,
                json=body,
                headers=self._build_headers(),
                timeout=self.config.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"API Call Error [{method} {endpoint}]: timed out after {self.config.timeout}s")
            raise NetworkError(
                f"{self.config.api_name} request timed out after {self.config.timeout}s",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"API Call Error [{method} {endpoint}]: {e}")
            raise NetworkError(f"{self.config.api_name} request failed: {e}", url=url) from e

        if not response.ok:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {}
            message = None
            if isinstance(error_data, dict):
                message = error_data.get("message")
            message = message or default_error or f"API Error: {response.status_code}"

            logger.error(f"API Call Error [{method} {endpoint}]: {message}")
            if response.status_code in (401, 403):
                raise AuthError(message, status=response.status_code, endpoint=endpoint)
            raise RemoteAPIError(message, status=response.status_code, endpoint=endpoint)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise MalformedPayloadError(
                f"{self.config.api_name} returned a non-JSON response",
                source=endpoint,
            ) from e
