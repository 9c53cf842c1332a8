from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from tradedesk.auth.dependencies import AdminPrincipal
from tradedesk.core.database import get_db
from tradedesk.core.logging import setup_logger
from tradedesk.models import notification
from tradedesk.models.user import Principal
from tradedesk.services.notification_service import NotificationService

logger = setup_logger("tradedesk.routers.notification")
router = APIRouter(tags=["notification"])


@router.get("/admin/{admin_id}", response_model=List[notification.Notification])
async def unread_notifications(
    admin_id: int = Path(...),
    admin: Principal = AdminPrincipal,
    db: Session = Depends(get_db),
):
    logger.info(f"Admin {admin.id} reading unread notifications of admin {admin_id}")
    return NotificationService(db).list_unread(admin_id)


@router.put("/{notification_id}/read", response_model=notification.Notification)
async def mark_read(
    notification_id: int = Path(...),
    admin: Principal = AdminPrincipal,
    db: Session = Depends(get_db),
):
    logger.info(f"Admin {admin.id} marking notification {notification_id} as read")
    return NotificationService(db).mark_read(notification_id)
