from typing import List

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.orm import Session

from tradedesk.auth.dependencies import AdminPrincipal
from tradedesk.core.database import get_db
from tradedesk.core.logging import setup_logger
from tradedesk.models import user
from tradedesk.models.base import Role
from tradedesk.models.user import Principal
from tradedesk.services.directory_service import DirectoryService

logger = setup_logger("tradedesk.routers.admin")
router = APIRouter(tags=["admin"])


@router.post("/users", response_model=user.UserAccount)
async def create_user(
    request: Request,
    body: user.NewUser,
    admin: Principal = AdminPrincipal,
    db: Session = Depends(get_db),
):
    """Create a user owned by the calling admin"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Admin {admin.id} creating user {body.username} from {client_ip}")

    owner_id = admin.id if admin.role == Role.ADMIN else None
    try:
        created = DirectoryService(db).create_user(body, admin_id=owner_id)
        logger.info(f"User {created.id} created by admin {admin.id}")
        return created
    except Exception as e:
        logger.error(f"Failed to create user {body.username} by admin {admin.id}: {str(e)}")
        raise


@router.get("/{admin_id}/users", response_model=List[user.UserAccount])
async def list_admin_users(
    admin_id: int = Path(...),
    admin: Principal = AdminPrincipal,
    db: Session = Depends(get_db),
):
    logger.info(f"Admin {admin.id} listing users of admin {admin_id}")
    return DirectoryService(db).list_users_by_admin(admin_id)
