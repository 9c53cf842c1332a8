from typing import List

from fastapi import APIRouter, Path, Request

from tradedesk.core.logging import setup_logger
from tradedesk.dependencies import CurrentSuperAdmin, DbSession
from tradedesk.models import user
from tradedesk.services.directory_service import DirectoryService

logger = setup_logger("tradedesk.routers.superadmin")
router = APIRouter(tags=["superadmin"])


@router.get("/admins", response_model=List[user.AdminAccount])
async def list_admins(super_admin: CurrentSuperAdmin, db: DbSession):
    logger.info(f"Super admin {super_admin.id} listing admins")
    return DirectoryService(db).list_admins()


@router.post("/admins", response_model=user.AdminAccount)
async def create_admin(request: Request, body: user.NewAdmin, super_admin: CurrentSuperAdmin, db: DbSession):
    """Create an admin account"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Super admin {super_admin.id} creating admin {body.username} from {client_ip}")

    try:
        created = DirectoryService(db).create_admin(body, created_by=super_admin.id)
        logger.info(f"Admin {created.id} created by super admin {super_admin.id}")
        return created
    except Exception as e:
        logger.error(f"Failed to create admin {body.username}: {str(e)}")
        raise


@router.get("/users", response_model=List[user.UserAccount])
async def list_users(super_admin: CurrentSuperAdmin, db: DbSession):
    logger.info(f"Super admin {super_admin.id} listing users")
    return DirectoryService(db).list_users()


@router.post("/users", response_model=user.UserAccount)
async def create_user(
    request: Request, body: user.SuperAdminNewUser, super_admin: CurrentSuperAdmin, db: DbSession
):
    """Create a user, optionally assigned to an admin"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(
        f"Super admin {super_admin.id} creating user {body.username} for admin {body.admin_id} from {client_ip}"
    )

    try:
        created = DirectoryService(db).create_user(body, admin_id=body.admin_id)
        logger.info(f"User {created.id} created by super admin {super_admin.id}")
        return created
    except Exception as e:
        logger.error(f"Failed to create user {body.username}: {str(e)}")
        raise


@router.get("/admins/{admin_id}/details", response_model=user.AdminDetails)
async def admin_details(super_admin: CurrentSuperAdmin, db: DbSession, admin_id: int = Path(...)):
    logger.info(f"Super admin {super_admin.id} reading details of admin {admin_id}")
    return DirectoryService(db).get_admin_details(admin_id)
