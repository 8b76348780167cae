from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, update
from sqlmodel import Session, select

from ..errors import store_errors
from ..ordering import level_rank
from .....models import GrievanceReport, SuspiciousEntity, SecurityAlert, ACTIVE_GRIEVANCE_STATUSES
from .....application.ports.report_repo import (
    ReportRepository,
    GrievanceDto,
    SuspiciousEntityDto,
    SecurityAlertDto,
    UserReportStats,
)
from .....utils import utcnow

GROUPABLE_COLUMNS = ("complaint_category", "location_area")


class SqlReportRepository(ReportRepository):
    def __init__(self, session: Session):
        self.session = session

    def _grievance_to_dto(self, g: GrievanceReport) -> GrievanceDto:
        return GrievanceDto(
            report_id=g.report_id,
            user_id=g.user_id,
            complaint_category=g.complaint_category,
            subcategory=g.subcategory,
            description=g.description,
            location=g.location,
            location_area=g.location_area,
            priority_level=g.priority_level,
            status=g.status,
            created_at=g.created_at,
        )

    def _entity_to_dto(self, e: SuspiciousEntity) -> SuspiciousEntityDto:
        return SuspiciousEntityDto(
            entity_id=e.entity_id,
            user_id=e.user_id,
            entity_type=e.entity_type,
            entity_value=e.entity_value,
            status=e.status,
            threat_level=e.threat_level,
            reported_by_count=e.reported_by_count,
            created_at=e.created_at,
        )

    def _alert_to_dto(self, a: SecurityAlert) -> SecurityAlertDto:
        return SecurityAlertDto(
            alert_id=a.alert_id,
            user_id=a.user_id,
            alert_type=a.alert_type,
            severity=a.severity,
            title=a.title,
            description=a.description,
            is_read=bool(a.is_read),
            created_at=a.created_at,
        )

    # Grievances

    def create_grievance(self, report_id: str, user_id: str, fields: Dict[str, Any]) -> GrievanceDto:
        report = GrievanceReport(report_id=report_id, user_id=user_id, status="pending", **fields)
        with store_errors(self.session, "report_grievance"):
            self.session.add(report)
            self.session.commit()
            self.session.refresh(report)
        return self._grievance_to_dto(report)

    def user_stats(self, user_id: str) -> UserReportStats:
        owned = GrievanceReport.user_id == user_id
        with store_errors(self.session, "user_stats"):
            by_status = dict(self.session.exec(
                select(GrievanceReport.status, func.count())
                .where(owned)
                .group_by(GrievanceReport.status)
            ).all())
            entity_counts = dict(self.session.exec(
                select(SuspiciousEntity.status, func.count())
                .where(SuspiciousEntity.user_id == user_id)
                .group_by(SuspiciousEntity.status)
            ).all())
        blocked = int(entity_counts.get("blocked", 0))
        open_entities = sum(n for status, n in entity_counts.items() if status not in ("blocked", "resolved"))
        return UserReportStats(
            total=int(sum(by_status.values())),
            pending=int(by_status.get("pending", 0)),
            active=int(sum(by_status.get(s, 0) for s in ACTIVE_GRIEVANCE_STATUSES)),
            resolved=int(by_status.get("resolved", 0)),
            closed=int(by_status.get("closed", 0)),
            threats_blocked=blocked,
            open_entities=int(open_entities),
        )

    def top_active_grievances(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        with store_errors(self.session, "top_active_grievances"):
            rows = self.session.exec(
                select(GrievanceReport)
                .where(GrievanceReport.user_id == user_id)
                .where(GrievanceReport.status.in_(ACTIVE_GRIEVANCE_STATUSES))
                .order_by(level_rank(GrievanceReport.priority_level).desc(), GrievanceReport.created_at.asc())
                .limit(limit)
            ).all()
        return [
            {
                "report_id": g.report_id,
                "complaint_category": g.complaint_category,
                "description": g.description,
                "created_at": g.created_at,
                "priority_level": g.priority_level,
            }
            for g in rows
        ]

    def grievance_counts_by(self, user_id: str, column: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        if column not in GROUPABLE_COLUMNS:
            raise ValueError(f"Cannot group grievances by {column}")
        attr = getattr(GrievanceReport, column)
        count = func.count().label("count")
        stmt = (
            select(attr, count)
            .where(GrievanceReport.user_id == user_id)
            .group_by(attr)
            .order_by(count.desc(), attr)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        with store_errors(self.session, "grievance_counts"):
            rows = self.session.exec(stmt).all()
        return [{column: value, "count": int(n)} for value, n in rows]

    def grievance_created_dates(self, user_id: str) -> List[datetime]:
        with store_errors(self.session, "grievance_dates"):
            return list(self.session.exec(
                select(GrievanceReport.created_at).where(GrievanceReport.user_id == user_id)
            ).all())

    # Suspicious entities

    def create_suspicious_entity(self, entity_id: str, user_id: str, fields: Dict[str, Any]) -> SuspiciousEntityDto:
        entity = SuspiciousEntity(
            entity_id=entity_id,
            user_id=user_id,
            status="reported",
            threat_level="medium",
            **fields,
        )
        with store_errors(self.session, "report_suspicious"):
            self.session.add(entity)
            self.session.commit()
            self.session.refresh(entity)
        return self._entity_to_dto(entity)

    def bump_similar_entities(self, entity_type: str, entity_value: str) -> int:
        table = SuspiciousEntity.__table__
        stmt = (
            update(table)
            .where(table.c.entity_type == entity_type)
            .where(table.c.entity_value == entity_value)
            .values(
                reported_by_count=table.c.reported_by_count + 1,
                last_seen=utcnow(),
                updated_at=utcnow(),
            )
        )
        with store_errors(self.session, "bump_similar_entities"):
            result = self.session.connection().execute(stmt)
            self.session.commit()
        return int(result.rowcount or 0)

    def top_blocked_entities(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        with store_errors(self.session, "top_blocked_entities"):
            rows = self.session.exec(
                select(SuspiciousEntity)
                .where(SuspiciousEntity.user_id == user_id)
                .where(SuspiciousEntity.status == "blocked")
                .order_by(level_rank(SuspiciousEntity.threat_level).desc(), SuspiciousEntity.blocked_at.desc())
                .limit(limit)
            ).all()
        return [
            {
                "entity_id": e.entity_id,
                "entity_type": e.entity_type,
                "threat_level": e.threat_level,
                "blocked_at": e.blocked_at,
                "description": e.description,
            }
            for e in rows
        ]

    # Security alerts

    def create_alert(self, alert_id: str, user_id: str, fields: Dict[str, Any]) -> SecurityAlertDto:
        alert = SecurityAlert(alert_id=alert_id, user_id=user_id, **fields)
        with store_errors(self.session, "create_alert"):
            self.session.add(alert)
            self.session.commit()
            self.session.refresh(alert)
        return self._alert_to_dto(alert)

    def list_alerts(self, user_id: str, limit: Optional[int] = None, unread_only: bool = False) -> List[SecurityAlertDto]:
        stmt = (
            select(SecurityAlert)
            .where(SecurityAlert.user_id == user_id)
            .order_by(level_rank(SecurityAlert.severity).desc(), SecurityAlert.created_at.desc())
        )
        if unread_only:
            stmt = stmt.where(SecurityAlert.is_read == False)  # noqa: E712
        if limit is not None:
            stmt = stmt.limit(limit)
        with store_errors(self.session, "list_alerts"):
            rows = self.session.exec(stmt).all()
        return [self._alert_to_dto(a) for a in rows]

    def mark_alert_read(self, user_id: str, alert_id: str) -> bool:
        with store_errors(self.session, "mark_alert_read"):
            alert = self.session.exec(
                select(SecurityAlert)
                .where(SecurityAlert.alert_id == alert_id)
                .where(SecurityAlert.user_id == user_id)
            ).first()
            if not alert:
                return False
            alert.is_read = True
            alert.updated_at = utcnow()
            self.session.add(alert)
            self.session.commit()
        return True

    def mark_all_alerts_read(self, user_id: str) -> int:
        table = SecurityAlert.__table__
        stmt = (
            update(table)
            .where(table.c.user_id == user_id)
            .where(table.c.is_read.is_(False))
            .values(is_read=True, updated_at=utcnow())
        )
        with store_errors(self.session, "mark_all_alerts_read"):
            result = self.session.connection().execute(stmt)
            self.session.commit()
        return int(result.rowcount or 0)
