import random
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Optional

from sqlalchemy.orm import Session

from tradedesk.core.config import settings
from tradedesk.core.exceptions import InvalidArgumentError, NotFoundError
from tradedesk.core.logging import setup_logger
from tradedesk.models.base import CENT, to_cents
from tradedesk.models.commodity import Commodity, TickResult
from tradedesk.repositories.commodity_repository import CommodityRepository


def next_price(
    current: Decimal,
    rng: random.Random,
    max_change: Decimal = settings.PRICE_MAX_CHANGE,
    floor: Decimal = settings.PRICE_FLOOR,
) -> Decimal:
    """
    One step of the simulated random walk.

    The relative change is uniform in [-max_change, +max_change). The result
    is rounded half-up to cents and never drops below the floor.
    """
    fraction = Decimal(repr(rng.random()))
    change = (fraction - Decimal("0.5")) * 2 * max_change
    new_price = (Decimal(current) * (1 + change)).quantize(CENT, rounding=ROUND_HALF_UP)
    return max(new_price, floor)


class PriceFeedService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = CommodityRepository(db)
        self.logger = setup_logger("tradedesk.services.price_feed")

    def tick(self, rng: Optional[random.Random] = None) -> TickResult:
        """
        Moves every commodity price one step.

        Each commodity is committed on its own, so a failure is logged and
        rolled back without touching the rest of the batch.
        """
        if rng is None:
            rng = random.Random()

        commodities = self.repository.get_all()
        updated = 0
        failed = 0

        for commodity in commodities:
            commodity_id = commodity.id
            try:
                old_price = Decimal(commodity.current_price)
                new_price = next_price(old_price, rng)
                self.repository.set_price(commodity, new_price)
                self.db.commit()
                updated += 1
                self.logger.debug(f"Commodity {commodity_id}: {old_price} -> {new_price}")
            except Exception as e:
                failed += 1
                self.db.rollback()
                self.logger.error(
                    f"Price update failed for commodity {commodity_id}: {str(e)}", exc_info=True
                )

        self.logger.info(f"Updated prices for {updated} commodities")
        if failed:
            self.logger.warning(f"Price update skipped {failed} commodities")
        return TickResult(updated=updated, failed=failed)

    def list_commodities(self) -> List[Commodity]:
        commodities = self.repository.get_all()
        self.logger.debug(f"Found {len(commodities)} commodities")
        return [self.repository.to_model(c) for c in commodities]

    def override_price(self, commodity_id: int, price) -> Commodity:
        """Sets a commodity price by hand, e.g. to correct the simulated feed."""
        try:
            value = price if isinstance(price, Decimal) else Decimal(str(price))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidArgumentError(f"Invalid price: {price}")

        if not value.is_finite() or to_cents(value) < settings.PRICE_FLOOR:
            raise InvalidArgumentError(
                f"Price must be at least {settings.PRICE_FLOOR}",
                details={"price": str(price)},
            )

        commodity = self.repository.get_by_id(commodity_id)
        if not commodity:
            raise NotFoundError(f"Commodity with id {commodity_id} not found")

        try:
            self.repository.set_price(commodity, to_cents(value))
            self.db.commit()
        except Exception as e:
            self.logger.error(f"Failed to override price of commodity {commodity_id}: {str(e)}")
            self.db.rollback()
            raise

        self.logger.info(f"Price of commodity {commodity_id} set to {commodity.current_price}")
        return self.repository.to_model(commodity)
