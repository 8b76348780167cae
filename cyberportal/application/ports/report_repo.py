from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol


@dataclass
class GrievanceDto:
    report_id: str
    user_id: str
    complaint_category: str
    subcategory: Optional[str]
    description: str
    location: str
    location_area: Optional[str]
    priority_level: str
    status: str
    created_at: datetime


@dataclass
class SuspiciousEntityDto:
    entity_id: str
    user_id: str
    entity_type: str
    entity_value: str
    status: str
    threat_level: str
    reported_by_count: int
    created_at: datetime


@dataclass
class SecurityAlertDto:
    alert_id: str
    user_id: str
    alert_type: str
    severity: str
    title: str
    description: str
    is_read: bool
    created_at: datetime


@dataclass
class UserReportStats:
    total: int
    pending: int
    active: int
    resolved: int
    closed: int
    threats_blocked: int
    open_entities: int

    @property
    def unresolved(self) -> int:
        return self.total - self.resolved


class ReportRepository(Protocol):
    def create_grievance(self, report_id: str, user_id: str, fields: Dict[str, Any]) -> GrievanceDto:
        ...

    def create_suspicious_entity(self, entity_id: str, user_id: str, fields: Dict[str, Any]) -> SuspiciousEntityDto:
        ...

    def bump_similar_entities(self, entity_type: str, entity_value: str) -> int:
        """Increment ``reported_by_count`` on earlier reports of the same entity; returns how many."""
        ...

    def user_stats(self, user_id: str) -> UserReportStats:
        ...

    def top_active_grievances(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        ...

    def grievance_counts_by(self, user_id: str, column: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        ...

    def grievance_created_dates(self, user_id: str) -> List[datetime]:
        ...

    def top_blocked_entities(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        ...

    def create_alert(self, alert_id: str, user_id: str, fields: Dict[str, Any]) -> SecurityAlertDto:
        ...

    def list_alerts(self, user_id: str, limit: Optional[int] = None, unread_only: bool = False) -> List[SecurityAlertDto]:
        ...

    def mark_alert_read(self, user_id: str, alert_id: str) -> bool:
        ...

    def mark_all_alerts_read(self, user_id: str) -> int:
        ...
