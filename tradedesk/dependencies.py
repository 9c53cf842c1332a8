from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from tradedesk.auth.dependencies import require_super_admin
from tradedesk.core.database import get_db
from tradedesk.models.user import Principal

DbSession = Annotated[Session, Depends(get_db)]

CurrentSuperAdmin = Annotated[Principal, Depends(require_super_admin)]
