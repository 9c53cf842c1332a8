from decimal import Decimal, InvalidOperation
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from tradedesk.core.exceptions import (
    InsufficientFundsError,
    InvalidArgumentError,
    NotFoundError,
)
from tradedesk.core.logging import setup_logger
from tradedesk.models.base import CENT, WalletDirection
from tradedesk.models.wallet import WalletLog
from tradedesk.repositories.user_repository import UserRepository
from tradedesk.repositories.wallet_log_repository import WalletLogRepository

CREDIT_REMARKS = "Amount added to wallet"
DEBIT_REMARKS = "Amount deducted from wallet"

# Operation names accepted by older clients
_DIRECTION_ALIASES = {
    "CREDIT": WalletDirection.CREDIT,
    "ADD": WalletDirection.CREDIT,
    "DEBIT": WalletDirection.DEBIT,
    "SUBTRACT": WalletDirection.DEBIT,
}


def parse_direction(direction: Union[str, WalletDirection]) -> WalletDirection:
    if isinstance(direction, WalletDirection):
        return direction
    key = str(direction).strip().upper() if direction is not None else ""
    if key not in _DIRECTION_ALIASES:
        raise InvalidArgumentError(
            f"Invalid wallet direction: {direction}",
            details={"allowed": [d.value for d in WalletDirection]},
        )
    return _DIRECTION_ALIASES[key]


def parse_amount(amount) -> Decimal:
    """Validates a positive monetary amount with at most two decimal places."""
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidArgumentError(f"Invalid amount: {amount}")

    if not value.is_finite() or value <= 0:
        raise InvalidArgumentError("Amount must be positive", details={"amount": str(amount)})

    try:
        has_extra_places = value != value.quantize(CENT)
    except InvalidOperation:
        raise InvalidArgumentError("Amount is too large", details={"amount": str(amount)})
    if has_extra_places:
        raise InvalidArgumentError(
            "Amount supports at most 2 decimal places",
            details={"amount": str(amount)},
        )
    return value.quantize(CENT)


class WalletService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.log_repo = WalletLogRepository(db)
        self.logger = setup_logger("tradedesk.services.wallet")

    def adjust(
        self, user_id: int, amount, direction: Union[str, WalletDirection]
    ) -> Decimal:
        """
        Credits or debits a user's wallet as one committed unit.

        Args:
            user_id: Wallet owner
            amount: Positive amount, rounded to cents
            direction: CREDIT or DEBIT (ADD/SUBTRACT are accepted too)

        Returns:
            Decimal: The balance after the adjustment

        Raises:
            InvalidArgumentError: Bad amount or direction
            NotFoundError: Unknown user
            InsufficientFundsError: A debit larger than the balance
        """
        try:
            balance = self.apply(user_id, amount, direction)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.logger.info(f"Wallet of user {user_id} adjusted, new balance={balance}")
        return balance

    def apply(
        self,
        user_id: int,
        amount,
        direction: Union[str, WalletDirection],
        order_id: Optional[int] = None,
    ) -> Decimal:
        """
        Mutates the balance and appends the audit entry inside the caller's
        transaction. The user row stays locked until that transaction ends.
        """
        direction = parse_direction(direction)
        amount = parse_amount(amount)

        user = self.user_repo.get_by_id_for_update(user_id)
        if not user:
            self.logger.warning(f"Wallet adjustment for unknown user {user_id}")
            raise NotFoundError(f"User with id {user_id} not found")

        balance = Decimal(user.wallet_balance)

        if direction == WalletDirection.DEBIT:
            if balance < amount:
                self.logger.warning(
                    f"Insufficient funds: user={user_id}, balance={balance}, requested={amount}"
                )
                raise InsufficientFundsError(
                    "Insufficient funds",
                    details={"balance": str(balance), "requested": str(amount)},
                )
            new_balance = balance - amount
            remarks = DEBIT_REMARKS
        else:
            new_balance = balance + amount
            remarks = CREDIT_REMARKS

        user.wallet_balance = new_balance
        self.log_repo.append(user_id, amount, direction, remarks, order_id=order_id)

        self.logger.debug(
            f"{direction.value} {amount} for user {user_id}: {balance} -> {new_balance}"
        )
        return new_balance

    def get_balance(self, user_id: int) -> Decimal:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User with id {user_id} not found")
        return Decimal(user.wallet_balance)

    def list_logs(self, user_id: int) -> List[WalletLog]:
        if not self.user_repo.get_by_id(user_id):
            raise NotFoundError(f"User with id {user_id} not found")
        return [self.log_repo.to_model(e) for e in self.log_repo.get_all_by_user(user_id)]
