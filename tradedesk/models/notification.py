from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Notification(BaseModel):
    id: int
    admin_id: Optional[int] = None
    message: str
    read_status: bool
    created_at: Optional[datetime] = None
