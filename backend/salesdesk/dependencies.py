"""
FastAPI dependencies for application-scoped objects.

create_app() stores Settings, Database and TokenService on `app.state`;
these helpers hand them to route handlers so no handler imports a
module-level singleton.
"""

from fastapi import Request

from salesdesk.config import Settings
from salesdesk.database import get_db_session
from salesdesk.security import get_current_user, get_token_service

__all__ = ["get_current_user", "get_db_session", "get_settings", "get_token_service"]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
