"""
Session/Auth gateway for the EcoMetrics data layer.

The data layer never owns credentials: it asks a SessionGateway for the current
Session and forwards the bearer token. In the Streamlit host the session lives in
``st.session_state`` under the same keys the login page writes.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, MutableMapping, Optional

import streamlit as st


# ==================== SESSION ====================

@dataclass
class Session:
    """Authentication state of the current user."""
    token: Optional[str] = None
    authenticated: bool = False
    user: Dict[str, Any] = field(default_factory=dict)

    @property
    def role(self) -> Optional[str]:
        """User role ('admin' or 'user') or None if not authenticated"""
        if not self.authenticated:
            return None
        return self.user.get("role")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def auth_headers(session: Session) -> Dict[str, str]:
    """
    Default headers for API requests.

    Returns:
        Content-Type always, Authorization only when a token is present
    """
    headers = {"Content-Type": "application/json"}
    if session.token:
        headers["Authorization"] = f"Bearer {session.token}"
    return headers


# ==================== GATEWAYS ====================

class SessionGateway(ABC):
    """Source of the current Session."""

    @abstractmethod
    def get_session(self) -> Session:
        pass

    @abstractmethod
    def set_session(self, session: Session) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class InMemorySessionGateway(SessionGateway):
    """Holds the session in the gateway object itself (scripts, tests)."""

    def __init__(self, session: Optional[Session] = None):
        self._session = session or Session()

    def get_session(self) -> Session:
        return self._session

    def set_session(self, session: Session) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = Session()


class StreamlitSessionGateway(SessionGateway):
    """
    Reads/writes the session from Streamlit session state.

    Keys: ``authenticated``, ``auth_token``, ``current_user``.
    """

    AUTHENTICATED_KEY = "authenticated"
    TOKEN_KEY = "auth_token"
    USER_KEY = "current_user"

    def __init__(self, state: Optional[MutableMapping[str, Any]] = None):
        self._state = state

    @property
    def state(self) -> MutableMapping[str, Any]:
        return self._state if self._state is not None else st.session_state

    def get_session(self) -> Session:
        return Session(
            token=self.state.get(self.TOKEN_KEY),
            authenticated=bool(self.state.get(self.AUTHENTICATED_KEY, False)),
            user=dict(self.state.get(self.USER_KEY) or {}),
        )

    def set_session(self, session: Session) -> None:
        self.state[self.AUTHENTICATED_KEY] = session.authenticated
        self.state[self.TOKEN_KEY] = session.token
        self.state[self.USER_KEY] = dict(session.user)

    def clear(self) -> None:
        for key in (self.AUTHENTICATED_KEY, self.TOKEN_KEY, self.USER_KEY):
            if key in self.state:
                del self.state[key]
