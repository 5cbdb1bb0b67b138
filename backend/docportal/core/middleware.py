from typing import Iterable, Optional

from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from docportal.config.constants import MULTIPART_OVERHEAD, Role
from docportal.config.settings import settings
from docportal.core.exceptions import ForbiddenError, error_body
from docportal.db.crud.auth import get_account_from_token
from docportal.db.models import AccountModel
from docportal.db.session import get_db_session
from docportal.schemas.shared import AnyPrincipal, principal_for

bearer_scheme = HTTPBearer(auto_error=False)

PROFILE_PIC_PATHS = ("/api/users/profile-pic",)


async def limit_upload_size(request: Request, call_next):
    """
    Reject oversized multipart bodies from the Content-Length header before
    any route runs. Staging re-checks the real byte count for chunked bodies.
    """
    content_type = request.headers.get("content-type", "")
    content_length = request.headers.get("content-length")
    if content_type.startswith("multipart/form-data") and content_length and content_length.isdigit():
        if any(request.url.path.startswith(p) for p in PROFILE_PIC_PATHS):
            limit = settings.max_profile_pic_size
        else:
            limit = settings.max_document_size
        if int(content_length) > limit + MULTIPART_OVERHEAD:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content=error_body(f"File size too large. Maximum size is {limit // (1024 * 1024)}MB."),
            )
    return await call_next(request)


# Get a database session dependency
async def get_db(request: Request):
    """Yield an async SQLAlchemy session (dependency)."""
    async for session in get_db_session(request):
        yield session


async def get_current_account(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> AnyPrincipal:
    """
    Dependency guarding every protected route.
    Resolves the bearer token to an account (401 otherwise), keeps the ORM
    row on ``request.state.account`` and returns the role-tagged principal.
    """
    account = await get_account_from_token(db, creds.credentials if creds else None)
    request.state.account = account
    return principal_for(account)


def current_account_model(
    request: Request,
    _principal: AnyPrincipal = Depends(get_current_account),
) -> AccountModel:
    """The caller's ORM row, bound to the request's session."""
    return request.state.account


def require_roles(roles: Iterable[Role]):
    """
    Factory function to create a dependency that requires specific roles.
    Usage: Depends(require_roles([Role.DOCTOR]))
    """
    allowed = {Role(r).value for r in roles}

    def _require_roles(principal: AnyPrincipal = Depends(get_current_account)) -> AnyPrincipal:
        if principal.role not in allowed:
            raise ForbiddenError("Not enough permissions")
        return principal

    return _require_roles


require_student = require_roles([Role.STUDENT])
require_doctor = require_roles([Role.DOCTOR])
