from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from tradedesk.auth.dependencies import CurrentPrincipal
from tradedesk.auth.service import AuthService
from tradedesk.core.database import get_db
from tradedesk.core.logging import setup_logger
from tradedesk.models import user
from tradedesk.models.user import Principal

logger = setup_logger("tradedesk.routers.auth")
router = APIRouter(tags=["auth"])


@router.post("/login", response_model=user.LoginResponse)
async def login(request: Request, body: user.LoginRequest, db: Session = Depends(get_db)):
    """Exchange username and password for a bearer token"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Login request for {body.username} from {client_ip}")

    try:
        return AuthService(db).login(body.username, body.password)
    except Exception as e:
        logger.warning(f"Login failed for {body.username} from {client_ip}: {str(e)}")
        raise


@router.get("/me", response_model=user.Account)
async def me(principal: Principal = CurrentPrincipal, db: Session = Depends(get_db)):
    logger.debug(f"Account lookup for {principal.role.value} {principal.id}")
    return AuthService(db).get_current_account(principal)
