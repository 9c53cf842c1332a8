from typing import List

from sqlalchemy.orm import Session

from tradedesk.core.exceptions import NotFoundError
from tradedesk.core.logging import setup_logger
from tradedesk.models.notification import Notification
from tradedesk.repositories.admin_repository import AdminRepository
from tradedesk.repositories.notification_repository import NotificationRepository


class NotificationService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = NotificationRepository(db)
        self.admin_repo = AdminRepository(db)
        self.logger = setup_logger("tradedesk.services.notification")

    def list_unread(self, admin_id: int) -> List[Notification]:
        if not self.admin_repo.get_by_id(admin_id):
            raise NotFoundError(f"Admin with id {admin_id} not found")
        notes = self.repository.get_unread_by_admin(admin_id)
        self.logger.debug(f"Admin {admin_id} has {len(notes)} unread notifications")
        return [self.repository.to_model(n) for n in notes]

    def mark_read(self, notification_id: int) -> Notification:
        note = self.repository.get_by_id(notification_id)
        if not note:
            raise NotFoundError(f"Notification with id {notification_id} not found")

        if not note.read_status:
            try:
                note.read_status = True
                self.db.commit()
            except Exception as e:
                self.logger.error(f"Failed to mark notification {notification_id} read: {str(e)}")
                self.db.rollback()
                raise
            self.logger.info(f"Notification {notification_id} marked as read")

        return self.repository.to_model(note)
