"""
Session/Auth gateway for EcoMetrics Tracker.
"""

from .session import (
    Session,
    SessionGateway,
    InMemorySessionGateway,
    StreamlitSessionGateway,
    auth_headers,
)

__all__ = [
    "Session",
    "SessionGateway",
    "InMemorySessionGateway",
    "StreamlitSessionGateway",
    "auth_headers",
]
