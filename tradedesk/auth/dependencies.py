from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tradedesk.auth.service import AuthService
from tradedesk.core.database import get_db
from tradedesk.core.exceptions import AuthenticationError, PermissionDeniedError
from tradedesk.core.logging import setup_logger
from tradedesk.models.base import Role
from tradedesk.models.user import Principal

logger = setup_logger("tradedesk.auth.dependencies")

bearer_scheme = HTTPBearer(auto_error=False)

ADMIN_ROLES = (Role.ADMIN, Role.SUPER_ADMIN)


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    """
    Resolves the bearer token into the caller's identity and role.
    The account must still exist and be ACTIVE.
    """
    if credentials is None:
        client_ip = request.client.host if request.client else "unknown"
        logger.warning(f"Unauthorized: no bearer token from {client_ip} to {request.url.path}")
        raise AuthenticationError("Not authenticated")

    principal = AuthService(db).resolve_principal(credentials.credentials)
    logger.debug(f"Authenticated {principal.role.value} {principal.id}")
    return principal


async def require_admin(
    request: Request,
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if principal.role not in ADMIN_ROLES:
        logger.warning(
            f"Access denied: {principal.role.value} {principal.id} to admin endpoint {request.url.path}"
        )
        raise PermissionDeniedError("Admin privileges required")
    return principal


async def require_super_admin(
    request: Request,
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if principal.role != Role.SUPER_ADMIN:
        logger.warning(
            f"Access denied: {principal.role.value} {principal.id} to super admin endpoint {request.url.path}"
        )
        raise PermissionDeniedError("Super admin privileges required")
    return principal


CurrentPrincipal = Depends(get_current_principal)
AdminPrincipal = Depends(require_admin)
SuperAdminPrincipal = Depends(require_super_admin)
