from typing import List

from fastapi import APIRouter, Body, Depends, Path, Request
from sqlalchemy.orm import Session

from tradedesk.auth.dependencies import AdminPrincipal, CurrentPrincipal
from tradedesk.core.database import get_db
from tradedesk.core.exceptions import InvalidArgumentError, PermissionDeniedError
from tradedesk.core.logging import setup_logger
from tradedesk.models import order
from tradedesk.models.base import Role
from tradedesk.models.user import Principal
from tradedesk.services.settlement_service import SettlementService

logger = setup_logger("tradedesk.routers.order")
router = APIRouter(tags=["order"])


def _order_owner(principal: Principal, body: order.PlaceOrderBody) -> int:
    if principal.role == Role.USER:
        if body.user_id is not None and body.user_id != principal.id:
            raise PermissionDeniedError("Users can only place orders for themselves")
        return principal.id
    if body.user_id is None:
        raise InvalidArgumentError("user_id is required when an admin places an order")
    return body.user_id


@router.post("", response_model=order.Order)
async def place_order(
    request: Request,
    body: order.PlaceOrderBody = Body(...),
    principal: Principal = CurrentPrincipal,
    db: Session = Depends(get_db),
):
    """Place a BUY or SELL request at the current commodity price"""
    client_ip = request.client.host if request.client else "unknown"
    user_id = _order_owner(principal, body)

    logger.info(
        f"Order request: user={user_id}, type={body.type}, commodity={body.commodity_id}, "
        f"qty={body.quantity}, by={principal.role.value} {principal.id}, from={client_ip}"
    )

    try:
        placed = SettlementService(db).place_order(user_id, body.commodity_id, body.quantity, body.type)
        logger.info(f"Order placed: order_id={placed.id}, user_id={user_id}")
        return placed
    except Exception as e:
        logger.error(f"Failed to place order for user {user_id}: {str(e)}")
        raise


@router.get("", response_model=List[order.Order])
async def list_orders(
    request: Request,
    admin: Principal = AdminPrincipal,
    db: Session = Depends(get_db),
):
    """All orders, newest first (admins only)"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"List orders request: admin={admin.id}, from={client_ip}")

    orders = SettlementService(db).list_orders()
    logger.info(f"Returned {len(orders)} orders to admin {admin.id}")
    return orders


@router.get("/mine", response_model=List[order.Order])
async def list_my_orders(
    principal: Principal = CurrentPrincipal,
    db: Session = Depends(get_db),
):
    if principal.role != Role.USER:
        raise PermissionDeniedError("Only users have their own orders")
    return SettlementService(db).list_user_orders(principal.id)


@router.put("/{order_id}/process", response_model=order.Order)
async def process_order(
    request: Request,
    body: order.ProcessOrderBody,
    order_id: int = Path(...),
    admin: Principal = AdminPrincipal,
    db: Session = Depends(get_db),
):
    """Approve or reject a pending order (admins only)"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Process order request: order_id={order_id}, action={body.action}, admin={admin.id}, from={client_ip}")

    deciding_admin = admin.id if admin.role == Role.ADMIN else None
    try:
        processed = SettlementService(db).process_order(order_id, body.action, admin_id=deciding_admin)
        logger.info(f"Order {order_id} is now {processed.status.value}")
        return processed
    except Exception as e:
        logger.error(f"Failed to process order {order_id} by admin {admin.id}: {str(e)}")
        raise
