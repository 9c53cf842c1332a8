from typing import List, Optional

from sqlalchemy.orm import Session

from tradedesk.core.logging import setup_logger
from tradedesk.entities.base import utcnow
from tradedesk.entities.notification import NotificationEntity
from tradedesk.models.notification import Notification


class NotificationRepository:
    def __init__(self, db: Session):
        self.db = db
        self.logger = setup_logger("tradedesk.repositories.notification")

    def create(self, admin_id: Optional[int], message: str) -> NotificationEntity:
        self.logger.debug(f"Creating notification for admin {admin_id}: {message}")
        note = NotificationEntity(
            admin_id=admin_id,
            message=message,
            read_status=False,
            created_at=utcnow(),
        )
        self.db.add(note)
        self.db.flush()
        return note

    def get_by_id(self, notification_id: int) -> Optional[NotificationEntity]:
        return self.db.query(NotificationEntity).filter(NotificationEntity.id == notification_id).first()

    def get_unread_by_admin(self, admin_id: int) -> List[NotificationEntity]:
        return (
            self.db.query(NotificationEntity)
            .filter(
                NotificationEntity.admin_id == admin_id,
                NotificationEntity.read_status == False,  # noqa: E712
            )
            .order_by(NotificationEntity.id.desc())
            .all()
        )

    def to_model(self, entity: NotificationEntity) -> Notification:
        return Notification(
            id=entity.id,
            admin_id=entity.admin_id,
            message=entity.message,
            read_status=entity.read_status,
            created_at=entity.created_at,
        )
