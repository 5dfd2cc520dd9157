"""flowpath Server Module.

Provides the FastAPI REST API for flow sessions.
"""

from flowpath.server.api import app, create_app
from flowpath.server.models import (
    AdvanceRequest,
    HealthResponse,
    SessionResponse,
    StartSessionRequest,
)

__all__ = [
    "app",
    "create_app",
    "AdvanceRequest",
    "HealthResponse",
    "SessionResponse",
    "StartSessionRequest",
]
