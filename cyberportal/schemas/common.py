# cyberportal/schemas/common.py
from pydantic import BaseModel
from typing import Any, Optional

__all__ = ["APIResponse", "ErrorResponse"]


class APIResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Any = None
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    data: None = None
    error: str
