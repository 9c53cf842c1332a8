from decimal import Decimal, InvalidOperation
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from tradedesk.core.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    TradeDeskError,
)
from tradedesk.core.logging import setup_logger
from tradedesk.models.base import (
    OrderAction,
    OrderStatus,
    OrderType,
    WalletDirection,
    to_cents,
)
from tradedesk.models.order import Order
from tradedesk.repositories.notification_repository import NotificationRepository
from tradedesk.repositories.order_repository import OrderRepository
from tradedesk.services.directory_service import DirectoryService
from tradedesk.services.wallet_service import WalletService

QUANTITY_STEP = Decimal("0.0001")


def settlement_amount(price: Decimal, quantity: Decimal) -> Decimal:
    """Wallet amount for an order, from the price stored at placement."""
    return to_cents(Decimal(price) * Decimal(quantity))


class SettlementService:
    """
    Order lifecycle: PENDING on placement, then exactly one decision.

    Approval moves money through WalletService inside the same database
    transaction that finalizes the order, so either both changes are
    committed or neither is.
    """

    def __init__(self, db: Session):
        self.db = db
        self.logger = setup_logger("tradedesk.services.settlement")
        self.order_repo = OrderRepository(db)
        self.directory = DirectoryService(db)
        self.notification_repo = NotificationRepository(db)
        self.wallet = WalletService(db)

    def place_order(
        self,
        user_id: int,
        commodity_id: int,
        quantity,
        order_type: Union[str, OrderType],
    ) -> Order:
        order_type = self._parse_type(order_type)
        quantity = self._parse_quantity(quantity)

        user = self.directory.find_user_by_id(user_id)
        commodity = self.directory.find_commodity_by_id(commodity_id)

        price = Decimal(commodity.current_price)
        if settlement_amount(price, quantity) <= 0:
            raise InvalidArgumentError(
                "Order value must be at least 0.01",
                details={"price": str(price), "quantity": str(quantity)},
            )

        try:
            order = self.order_repo.create(
                user_id=user.id,
                commodity_id=commodity.id,
                admin_id=user.admin_id,
                order_type=order_type,
                quantity=quantity,
                price=price,
            )
            self.notification_repo.create(
                user.admin_id,
                f"New {order_type.value} request by user: {user.username}",
            )
            self.db.commit()
        except Exception as e:
            self.logger.error(f"Failed to place order for user {user_id}: {str(e)}")
            self.db.rollback()
            raise

        self.logger.info(
            f"Order {order.id} placed: user={user_id}, {order_type.value} {quantity} "
            f"x {commodity.name} @ {price}, admin={user.admin_id}"
        )
        return self.order_repo.to_model(order)

    def list_orders(self) -> List[Order]:
        return [self.order_repo.to_model(o) for o in self.order_repo.get_all()]

    def list_user_orders(self, user_id: int) -> List[Order]:
        return [self.order_repo.to_model(o) for o in self.order_repo.get_all_by_user(user_id)]

    def get_order(self, order_id: int) -> Order:
        order = self.order_repo.get_by_id(order_id)
        if not order:
            raise NotFoundError(f"Order with id {order_id} not found")
        return self.order_repo.to_model(order)

    def process_order(
        self,
        order_id: int,
        action: Union[str, OrderAction],
        admin_id: Optional[int] = None,
    ) -> Order:
        """
        Approves or rejects a PENDING order.

        Args:
            order_id: Order to decide
            action: "approve" or "reject"
            admin_id: Deciding admin, recorded when the order has no owner

        Raises:
            NotFoundError: Unknown order
            ConflictError: The order was already approved or rejected
            InvalidArgumentError: Unknown action
            InsufficientFundsError: A BUY the user cannot pay for; the order
                stays PENDING
        """
        try:
            order = self.order_repo.get_by_id_for_update(order_id)
            if not order:
                raise NotFoundError(f"Order with id {order_id} not found")

            if order.status != OrderStatus.PENDING:
                raise ConflictError(
                    f"Order {order_id} is already {order.status.value}",
                    details={"status": order.status.value},
                )

            action = self._parse_action(action)

            if action == OrderAction.APPROVE:
                amount = settlement_amount(order.price, order.quantity)
                direction = (
                    WalletDirection.DEBIT if order.type == OrderType.BUY else WalletDirection.CREDIT
                )
                self.wallet.apply(order.user_id, amount, direction, order_id=order.id)
                self.order_repo.finalize(order, OrderStatus.APPROVED, admin_id=admin_id)
            else:
                self.order_repo.finalize(order, OrderStatus.REJECTED, admin_id=admin_id)

            self.db.commit()
        except TradeDeskError as e:
            self.logger.warning(f"Order {order_id} not processed: {e.error_code} {e.message}")
            self.db.rollback()
            raise
        except Exception as e:
            self.logger.error(f"Order {order_id} processing failed: {str(e)}", exc_info=True)
            self.db.rollback()
            raise

        self.logger.info(f"Order {order_id} {order.status.value} by admin {admin_id}")
        return self.order_repo.to_model(order)

    def _parse_type(self, order_type) -> OrderType:
        if isinstance(order_type, OrderType):
            return order_type
        try:
            return OrderType(str(order_type).strip().upper())
        except ValueError:
            raise InvalidArgumentError(
                f"Invalid order type: {order_type}",
                details={"allowed": [t.value for t in OrderType]},
            )

    def _parse_action(self, action) -> OrderAction:
        if isinstance(action, OrderAction):
            return action
        try:
            return OrderAction(str(action).strip().lower())
        except ValueError:
            raise InvalidArgumentError(
                f"Invalid action: {action}",
                details={"allowed": [a.value for a in OrderAction]},
            )

    def _parse_quantity(self, quantity) -> Decimal:
        try:
            value = quantity if isinstance(quantity, Decimal) else Decimal(str(quantity))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidArgumentError(f"Invalid quantity: {quantity}")

        if not value.is_finite() or value <= 0:
            raise InvalidArgumentError("Quantity must be positive", details={"quantity": str(quantity)})
        try:
            has_extra_places = value != value.quantize(QUANTITY_STEP)
        except InvalidOperation:
            raise InvalidArgumentError("Quantity is too large", details={"quantity": str(quantity)})
        if has_extra_places:
            raise InvalidArgumentError(
                "Quantity supports at most 4 decimal places",
                details={"quantity": str(quantity)},
            )
        return value
