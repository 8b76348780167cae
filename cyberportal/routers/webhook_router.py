import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header

from .deps import get_identity_sync_service
from ..application.services.identity_sync_service import IdentitySyncService
from ..config import settings
from ..exceptions import ForbiddenError, create_success_response
from ..schemas import APIResponse, IdentityWebhookEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["Webhooks"])


def verify_webhook_secret(x_webhook_secret: Optional[str] = Header(None)) -> None:
    expected = settings.IDENTITY_WEBHOOK_SECRET
    if not expected:
        return
    if not x_webhook_secret or not secrets.compare_digest(x_webhook_secret, expected):
        logger.warning("Identity webhook rejected: bad shared secret")
        raise ForbiddenError("Invalid webhook secret")


@router.post("/identity", response_model=APIResponse, dependencies=[Depends(verify_webhook_secret)])
def identity_webhook(event: IdentityWebhookEvent, service: IdentitySyncService = Depends(get_identity_sync_service)):
    synced = service.handle_event(event.type, event.data)
    return create_success_response({"type": event.type, "synced": synced}, "Webhook received")
