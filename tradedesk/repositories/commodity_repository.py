from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from tradedesk.core.logging import setup_logger
from tradedesk.entities.base import utcnow
from tradedesk.entities.commodity import CommodityEntity
from tradedesk.models.commodity import Commodity


class CommodityRepository:
    def __init__(self, db: Session):
        self.db = db
        self.logger = setup_logger("tradedesk.repositories.commodity")

    def create(self, name: str, unit: str, price: Decimal) -> CommodityEntity:
        self.logger.info(f"Creating commodity: name={name}, unit={unit}, price={price}")
        commodity = CommodityEntity(name=name, unit=unit, current_price=price, last_updated=utcnow())
        self.db.add(commodity)
        self.db.flush()
        return commodity

    def get_by_id(self, commodity_id: int) -> Optional[CommodityEntity]:
        self.logger.debug(f"Fetching commodity by id: {commodity_id}")
        return self.db.query(CommodityEntity).filter(CommodityEntity.id == commodity_id).first()

    def get_all(self) -> List[CommodityEntity]:
        return self.db.query(CommodityEntity).order_by(CommodityEntity.id).all()

    def count(self) -> int:
        return self.db.query(CommodityEntity).count()

    def set_price(self, commodity: CommodityEntity, price: Decimal) -> CommodityEntity:
        """Stores a new price and stamps the update time; the caller commits."""
        commodity.current_price = price
        commodity.last_updated = utcnow()
        self.db.flush()
        return commodity

    def to_model(self, entity: CommodityEntity) -> Commodity:
        return Commodity(
            id=entity.id,
            name=entity.name,
            unit=entity.unit,
            current_price=entity.current_price,
            last_updated=entity.last_updated,
        )
