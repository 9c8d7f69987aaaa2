"""FastAPI dependencies resolving the acting user."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ..lib.database.models import Principal
from ..lib.exceptions import UnauthorizedError

# Missing credentials are reported by get_current_principal, not by HTTPBasic
basic_auth = HTTPBasic(auto_error=False, description="Login or email as the user name")


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
) -> Principal:
    """Authenticate the request and return its principal.

    Raises:
        UnauthorizedError: If credentials are missing or wrong
    """
    if credentials is None:
        raise UnauthorizedError("Authentication is required")

    auth_service = request.app.state.auth_service
    principal = await auth_service.authenticate(credentials.username, credentials.password)
    request.state.principal = principal
    return principal
