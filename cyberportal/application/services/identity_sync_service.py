import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..ports.identity_repo import IdentityRepository
from ...exceptions import ValidationError

logger = logging.getLogger(__name__)

SYNC_EVENTS = ("user.created", "user.updated")


def _first(items: Optional[List[Dict[str, Any]]], key: str) -> Optional[str]:
    if not items:
        return None
    return items[0].get(key) or None


@dataclass
class IdentitySyncService:
    """Mirrors identity-provider user events into the local user-sync table."""

    identity_repo: IdentityRepository

    def handle_event(self, event_type: str, data: Optional[Dict[str, Any]]) -> bool:
        logger.info(f"Received identity webhook: {event_type}")
        if event_type not in SYNC_EVENTS:
            return False

        data = data or {}
        provider_user_id = data.get("id")
        if not provider_user_id:
            raise ValidationError("Webhook payload is missing the user id")

        full_name = f"{data.get('first_name') or ''} {data.get('last_name') or ''}".strip()
        self.identity_repo.upsert(
            provider_user_id=provider_user_id,
            full_name=full_name,
            phone=_first(data.get("phone_numbers"), "phone_number"),
            email=_first(data.get("email_addresses"), "email_address"),
        )
        logger.info(f"User {provider_user_id} was synced from the identity provider")
        return True
