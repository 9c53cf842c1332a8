from typing import Any, Dict

from pydantic import BaseModel


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = {}


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorBody
