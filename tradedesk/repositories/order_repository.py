from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Query, Session

from tradedesk.core.logging import setup_logger
from tradedesk.entities.base import utcnow
from tradedesk.entities.order import OrderEntity
from tradedesk.models.base import OrderStatus, OrderType
from tradedesk.models.order import Order


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db
        self.logger = setup_logger("tradedesk.repositories.order")

    def create(
        self,
        user_id: int,
        commodity_id: int,
        admin_id: Optional[int],
        order_type: OrderType,
        quantity: Decimal,
        price: Decimal,
    ) -> OrderEntity:
        self.logger.info(
            f"Creating order: user={user_id}, commodity={commodity_id}, "
            f"type={order_type.value}, qty={quantity}, price={price}"
        )
        order = OrderEntity(
            user_id=user_id,
            commodity_id=commodity_id,
            admin_id=admin_id,
            type=order_type,
            quantity=quantity,
            price=price,
            status=OrderStatus.PENDING,
            timestamp=utcnow(),
        )
        self.db.add(order)
        self.db.flush()
        return order

    def get_by_id(self, order_id: int) -> Optional[OrderEntity]:
        self.logger.debug(f"Fetching order by id: {order_id}")
        return self.db.query(OrderEntity).filter(OrderEntity.id == order_id).first()

    def query_for_update(self, order_id: int) -> Query:
        return (
            self.db.query(OrderEntity)
            .filter(OrderEntity.id == order_id)
            .populate_existing()
            .with_for_update()
        )

    def get_by_id_for_update(self, order_id: int) -> Optional[OrderEntity]:
        """Fetches the order with a row lock so only one decision can win."""
        self.logger.debug(f"Locking order row: {order_id}")
        return self.query_for_update(order_id).first()

    def get_all(self) -> List[OrderEntity]:
        orders = self.db.query(OrderEntity).order_by(OrderEntity.id.desc()).all()
        self.logger.debug(f"Found {len(orders)} orders")
        return orders

    def get_all_by_user(self, user_id: int) -> List[OrderEntity]:
        return (
            self.db.query(OrderEntity)
            .filter(OrderEntity.user_id == user_id)
            .order_by(OrderEntity.id.desc())
            .all()
        )

    def finalize(self, order: OrderEntity, status: OrderStatus, admin_id: Optional[int] = None) -> OrderEntity:
        old_status = order.status
        order.status = status
        order.processed_at = utcnow()
        if order.admin_id is None and admin_id is not None:
            order.admin_id = admin_id
        self.db.flush()
        self.logger.info(f"Order {order.id} status: {old_status.value} -> {status.value}")
        return order

    def to_model(self, entity: OrderEntity) -> Order:
        return Order(
            id=entity.id,
            user_id=entity.user_id,
            commodity_id=entity.commodity_id,
            admin_id=entity.admin_id,
            type=entity.type,
            quantity=entity.quantity,
            price=entity.price,
            status=entity.status,
            timestamp=entity.timestamp,
            processed_at=entity.processed_at,
        )
