"""
Authentication client for the EcoMetrics backend
Logs users in and out and stores the resulting session in the SessionGateway
"""
from typing import Any, Dict
import logging

from eco_core.auth.session import Session
from eco_core.errors import EcoMetricsError, MalformedPayloadError

from .base_connector import BaseAPIConnector

logger = logging.getLogger(__name__)


class AuthClient(BaseAPIConnector):
    """
    Usage:
        client = AuthClient(APIConfig("EcoMetrics API", base_url), gateway)
        client.login("admin", "secret")
        gateway.get_session().is_admin
    """

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """
        Authenticate and store token + user in the session

        Raises:
            AuthError / RemoteAPIError: rejected credentials (server message or "Login failed")
            MalformedPayloadError: response without data.token
        """
        response = self._make_request(
            "/auth/login",
            "POST",
            data={"username": username, "password": password},
            default_error="Login failed",
        )

        data = response.get("data") if isinstance(response, dict) else None
        if not isinstance(data, dict) or not data.get("token"):
            raise MalformedPayloadError("Login response carries no token", source="/auth/login")

        self.session_gateway.set_session(
            Session(token=data["token"], authenticated=True, user=dict(data.get("user") or {}))
        )
        logger.info(f"User '{username}' logged in")
        return response

    def logout(self) -> None:
        """Invalidate the token on the backend; the local session is cleared regardless"""
        try:
            if self.session_gateway.get_session().token:
                self._make_request("/auth/logout", "POST")
        except EcoMetricsError as e:
            logger.error(f"Logout error: {e}")
        finally:
            self.session_gateway.clear()

    def register(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._make_request(
            "/auth/register",
            "POST",
            data=user_data,
            default_error="Registration failed",
        )
