from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from tradedesk.core.logging import setup_logger
from tradedesk.entities.base import utcnow
from tradedesk.entities.wallet_log import WalletLogEntity
from tradedesk.models.base import WalletDirection
from tradedesk.models.wallet import WalletLog


class WalletLogRepository:
    """Append-only access to the wallet audit trail. There is no update or delete."""

    def __init__(self, db: Session):
        self.db = db
        self.logger = setup_logger("tradedesk.repositories.wallet_log")

    def append(
        self,
        user_id: int,
        amount: Decimal,
        direction: WalletDirection,
        remarks: str,
        order_id: Optional[int] = None,
    ) -> WalletLogEntity:
        entry = WalletLogEntity(
            user_id=user_id,
            order_id=order_id,
            change_amount=amount,
            transaction_type=direction,
            remarks=remarks,
            timestamp=utcnow(),
        )
        self.db.add(entry)
        self.db.flush()
        self.logger.debug(f"Wallet log appended: user={user_id}, {direction.value} {amount}, order={order_id}")
        return entry

    def get_all_by_user(self, user_id: int) -> List[WalletLogEntity]:
        return (
            self.db.query(WalletLogEntity)
            .filter(WalletLogEntity.user_id == user_id)
            .order_by(WalletLogEntity.id.desc())
            .all()
        )

    def get_all_by_order(self, order_id: int) -> List[WalletLogEntity]:
        return (
            self.db.query(WalletLogEntity)
            .filter(WalletLogEntity.order_id == order_id)
            .all()
        )

    def to_model(self, entity: WalletLogEntity) -> WalletLog:
        return WalletLog(
            id=entity.id,
            user_id=entity.user_id,
            order_id=entity.order_id,
            change_amount=entity.change_amount,
            transaction_type=entity.transaction_type,
            remarks=entity.remarks,
            timestamp=entity.timestamp,
        )
