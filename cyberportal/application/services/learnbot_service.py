import json
import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from .access import require_role
from .ai_service import AIService
from ..ports.learnbot_repo import LearnbotRepository
from ..ports.user_repo import UserRepository
from ...exceptions import AIWorkerError, ValidationError
from ...models import Role
from ...utils import generate_reference_id

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10


def _read_chat_result(result: Any) -> Tuple[str, Optional[str], Optional[float]]:
    """Pull ``(response, model_used, confidence_score)`` out of a chat worker reply."""
    if isinstance(result, str):
        return result, None, None
    if isinstance(result, dict):
        response = result.get("response") or result.get("answer") or result.get("text")
        if response is None:
            response = json.dumps(result)
        model_used = result.get("model_used") or result.get("model")
        confidence = result.get("confidence_score", result.get("confidence"))
        try:
            confidence = float(confidence) if confidence is not None else None
        except (TypeError, ValueError):
            confidence = None
        return str(response), model_used, confidence
    return json.dumps(result), None, None


@dataclass
class LearnbotService:
    user_repo: UserRepository
    learnbot_repo: LearnbotRepository
    ai: AIService

    def history(self, user_id: str) -> List[Dict[str, Any]]:
        require_role(self.user_repo, user_id, Role.USER)
        return [asdict(r) for r in self.learnbot_repo.recent_for_user(user_id, HISTORY_LIMIT)]

    def ask(self, user_id: str, request_type: Optional[str], query: Optional[str]) -> Dict[str, Any]:
        require_role(self.user_repo, user_id, Role.USER)
        if not request_type or not request_type.strip() or not query or not query.strip():
            raise ValidationError("Request type and query are required")

        request = self.learnbot_repo.create(generate_reference_id("LB"), user_id, request_type.strip(), query.strip())

        started = time.perf_counter()
        try:
            result = self.ai.chat(request.query, context=request.request_type)
        except AIWorkerError as e:
            logger.warning(f"Learnbot request {request.request_id} failed: {e.message}")
            request = self.learnbot_repo.finish(request.request_id, "failed", None, None, None, None)
            return asdict(request)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        response, model_used, confidence = _read_chat_result(result)
        request = self.learnbot_repo.finish(
            request.request_id, "completed", response, elapsed_ms, model_used, confidence
        )
        return asdict(request)
