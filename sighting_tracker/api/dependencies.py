"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

import logging
import secrets
from typing import Callable

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def create_admin_guard(admin_token: str | None) -> Callable[..., None]:
    """Build a dependency that admits only requests bearing *admin_token*.

    A missing token configuration refuses every request rather than
    admitting them.
    """

    def require_admin(
        credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    ) -> None:
        if not admin_token:
            logger.error("Admin endpoint called but no admin token is configured")
            raise HTTPException(status_code=503, detail="Admin authentication not configured")
        if credentials is None:
            raise HTTPException(status_code=401, detail="No authorization token provided")
        if not secrets.compare_digest(credentials.credentials.encode(), admin_token.encode()):
            raise HTTPException(status_code=401, detail="Invalid admin token")

    return require_admin
