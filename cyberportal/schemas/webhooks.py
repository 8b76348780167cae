# cyberportal/schemas/webhooks.py
from pydantic import BaseModel
from typing import Any, Dict, Optional

__all__ = ["IdentityWebhookEvent"]


class IdentityWebhookEvent(BaseModel):
    type: str
    data: Optional[Dict[str, Any]] = None
