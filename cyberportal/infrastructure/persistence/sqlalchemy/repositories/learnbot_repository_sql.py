from typing import List, Optional
from sqlmodel import Session, select

from ..errors import store_errors
from .....models import LearnbotRequest
from .....application.ports.learnbot_repo import LearnbotRepository, LearnbotRequestDto
from .....exceptions import NotFoundError
from .....utils import utcnow


class SqlLearnbotRepository(LearnbotRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, r: LearnbotRequest) -> LearnbotRequestDto:
        return LearnbotRequestDto(
            request_id=r.request_id,
            user_id=r.user_id,
            request_type=r.request_type,
            query=r.query,
            response=r.response,
            status=r.status,
            created_at=r.created_at,
            processing_time_ms=r.processing_time_ms,
            model_used=r.model_used,
            confidence_score=r.confidence_score,
        )

    def create(self, request_id: str, user_id: str, request_type: str, query: str) -> LearnbotRequestDto:
        entry = LearnbotRequest(
            request_id=request_id,
            user_id=user_id,
            request_type=request_type,
            query=query,
            status="pending",
        )
        with store_errors(self.session, "create_learnbot_request"):
            self.session.add(entry)
            self.session.commit()
            self.session.refresh(entry)
        return self._to_dto(entry)

    def finish(self, request_id: str, status: str, response: Optional[str], processing_time_ms: Optional[int],
               model_used: Optional[str], confidence_score: Optional[float]) -> LearnbotRequestDto:
        with store_errors(self.session, "finish_learnbot_request"):
            entry = self.session.exec(select(LearnbotRequest).where(LearnbotRequest.request_id == request_id)).first()
            if not entry:
                raise NotFoundError("Learnbot request not found")
            entry.status = status
            entry.response = response
            entry.processing_time_ms = processing_time_ms
            entry.model_used = model_used
            entry.confidence_score = confidence_score
            entry.updated_at = utcnow()
            self.session.add(entry)
            self.session.commit()
            self.session.refresh(entry)
        return self._to_dto(entry)

    def recent_for_user(self, user_id: str, limit: int) -> List[LearnbotRequestDto]:
        with store_errors(self.session, "list_learnbot_requests"):
            rows = self.session.exec(
                select(LearnbotRequest)
                .where(LearnbotRequest.user_id == user_id)
                .order_by(LearnbotRequest.created_at.desc())
                .limit(limit)
            ).all()
        return [self._to_dto(r) for r in rows]
