from typing import List

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.orm import Session

from tradedesk.auth.dependencies import AdminPrincipal, CurrentPrincipal
from tradedesk.core.database import get_db
from tradedesk.core.logging import setup_logger
from tradedesk.models import commodity
from tradedesk.models.user import Principal
from tradedesk.services.price_feed_service import PriceFeedService

logger = setup_logger("tradedesk.routers.commodity")
router = APIRouter(tags=["commodity"])


@router.get("", response_model=List[commodity.Commodity])
async def list_commodities(
    request: Request,
    principal: Principal = CurrentPrincipal,
    db: Session = Depends(get_db),
):
    """Current prices of all commodities"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Fetching commodities for {principal.role.value} {principal.id} from {client_ip}")

    try:
        commodities = PriceFeedService(db).list_commodities()
        logger.info(f"Returned {len(commodities)} commodities to {client_ip}")
        return commodities
    except Exception as e:
        logger.error(f"Error fetching commodities for {client_ip}: {str(e)}")
        raise


@router.put("/{commodity_id}/price", response_model=commodity.Commodity)
async def override_price(
    request: Request,
    body: commodity.PriceOverride,
    commodity_id: int = Path(...),
    admin: Principal = AdminPrincipal,
    db: Session = Depends(get_db),
):
    """Set a commodity price by hand (admins only)"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Admin {admin.id} setting price of commodity {commodity_id} to {body.price} from {client_ip}")

    try:
        result = PriceFeedService(db).override_price(commodity_id, body.price)
        logger.info(f"Price of commodity {commodity_id} overridden by admin {admin.id}")
        return result
    except Exception as e:
        logger.error(f"Failed to override price of commodity {commodity_id} by admin {admin.id}: {str(e)}")
        raise
