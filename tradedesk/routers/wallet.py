from typing import List

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.orm import Session

from tradedesk.auth.dependencies import ADMIN_ROLES, AdminPrincipal, CurrentPrincipal
from tradedesk.core.database import get_db
from tradedesk.core.exceptions import PermissionDeniedError
from tradedesk.core.logging import setup_logger
from tradedesk.models import wallet
from tradedesk.models.user import Principal
from tradedesk.services.wallet_service import WalletService

logger = setup_logger("tradedesk.routers.wallet")
router = APIRouter(tags=["wallet"])


@router.post("/adjust", response_model=wallet.WalletBalance)
async def adjust_wallet(
    request: Request,
    body: wallet.WalletAdjustBody,
    admin: Principal = AdminPrincipal,
    db: Session = Depends(get_db),
):
    """Credit or debit a user's wallet (admins only)"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(
        f"Admin {admin.id} adjusting wallet: user={body.user_id}, {body.direction} {body.amount}, from={client_ip}"
    )

    try:
        balance = WalletService(db).adjust(body.user_id, body.amount, body.direction)
        logger.info(f"Wallet of user {body.user_id} adjusted by admin {admin.id}")
        return wallet.WalletBalance(user_id=body.user_id, balance=balance)
    except Exception as e:
        logger.error(f"Failed to adjust wallet of user {body.user_id} by admin {admin.id}: {str(e)}")
        raise


@router.get("/{user_id}/logs", response_model=List[wallet.WalletLog])
async def wallet_logs(
    user_id: int = Path(...),
    principal: Principal = CurrentPrincipal,
    db: Session = Depends(get_db),
):
    """Wallet history, newest first. Visible to admins and to the owner."""
    if principal.role not in ADMIN_ROLES and principal.id != user_id:
        logger.warning(f"User {principal.id} tried to read wallet logs of user {user_id}")
        raise PermissionDeniedError("Cannot read another user's wallet")
    return WalletService(db).list_logs(user_id)
