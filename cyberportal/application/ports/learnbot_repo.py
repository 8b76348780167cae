from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol


@dataclass
class LearnbotRequestDto:
    request_id: str
    user_id: str
    request_type: str
    query: str
    response: Optional[str]
    status: str
    created_at: datetime
    processing_time_ms: Optional[int] = None
    model_used: Optional[str] = None
    confidence_score: Optional[float] = None


class LearnbotRepository(Protocol):
    def create(self, request_id: str, user_id: str, request_type: str, query: str) -> LearnbotRequestDto:
        ...

    def finish(self, request_id: str, status: str, response: Optional[str], processing_time_ms: Optional[int],
               model_used: Optional[str], confidence_score: Optional[float]) -> LearnbotRequestDto:
        ...

    def recent_for_user(self, user_id: str, limit: int) -> List[LearnbotRequestDto]:
        ...
