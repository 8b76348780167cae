import hashlib
import json
import logging
from typing import Optional, Dict, Any

from ...application.ports.audit_logger import AuditLogger
from ...utils import utcnow


class StdAuditLogger(AuditLogger):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def log(self, action: str, phone: str, user_id: Optional[str] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        entry = {
            "timestamp": utcnow().isoformat(),
            "action": action,
            "phone_hash": hashlib.sha256(phone.encode()).hexdigest(),
            "user_id": user_id,
            "success": success,
            "details": details or {},
        }
        if success:
            self._logger.info(f"AUDIT: {json.dumps(entry)}")
        else:
            self._logger.warning(f"AUDIT: {json.dumps(entry)}")
