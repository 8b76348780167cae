from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .report_repo import GrievanceDto


@dataclass
class ComplaintFilters:
    status: Optional[str] = None
    department: Optional[str] = None
    priority: Optional[str] = None


@dataclass
class GrievanceFact:
    """The handful of columns the analytics are computed from."""
    complaint_category: str
    department: Optional[str]
    location_area: Optional[str]
    status: str
    created_at: datetime
    resolved_at: Optional[datetime]


class AdminRepository(Protocol):
    def complaint_counts(self) -> Dict[str, int]:
        ...

    def top_complaints(self, limit: int) -> List[Dict[str, Any]]:
        ...

    def top_pending(self, limit: int) -> List[Dict[str, Any]]:
        ...

    def list_complaints(self, filters: ComplaintFilters, offset: int, limit: int) -> Tuple[List[Dict[str, Any]], int]:
        ...

    def get_grievance(self, report_id: str) -> Optional[GrievanceDto]:
        ...

    def assign_case(self, report_id: str, assigned_to: Optional[str], assigned_department: str,
                    due_date: Optional[datetime], notes: Optional[str]) -> Dict[str, Any]:
        ...

    def update_case(self, report_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def grievance_facts(self) -> List[GrievanceFact]:
        ...

    def average_ai_accuracy(self) -> Optional[float]:
        ...
