from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import Session, select

from ..errors import store_errors
from ..ordering import level_rank
from .....models import GrievanceReport, CaseAssignment, LearnbotRequest, User
from .....application.ports.admin_repo import AdminRepository, ComplaintFilters, GrievanceFact
from .....application.ports.report_repo import GrievanceDto
from .....exceptions import NotFoundError
from .....utils import utcnow

SUMMARY_FIELDS = (
    "report_id", "complaint_category", "classification", "department", "location",
    "priority_level", "status", "created_at", "evidence_count", "loss_amount",
)
PENDING_FIELDS = (
    "report_id", "complaint_category", "department", "location", "priority_level",
    "overdue_by", "created_at", "evidence_count", "loss_amount",
)
LISTING_FIELDS = (
    "report_id", "complaint_category", "subcategory", "classification", "department",
    "location", "priority_level", "status", "ai_summary", "ai_analysis", "created_at",
    "evidence_count", "loss_amount", "overdue_by", "assigned_department",
)


def _pick(report: GrievanceReport, fields) -> Dict[str, Any]:
    return {name: getattr(report, name) for name in fields}


class SqlAdminRepository(AdminRepository):
    def __init__(self, session: Session):
        self.session = session

    def _filtered(self, stmt, filters: ComplaintFilters):
        if filters.status:
            stmt = stmt.where(GrievanceReport.status == filters.status)
        if filters.department:
            stmt = stmt.where(GrievanceReport.department == filters.department)
        if filters.priority:
            stmt = stmt.where(GrievanceReport.priority_level == filters.priority)
        return stmt

    def _with_reporter(self):
        return (
            select(GrievanceReport, User.full_name)
            .outerjoin(User, GrievanceReport.user_id == User.id)
        )

    def _get_report(self, report_id: str) -> Optional[GrievanceReport]:
        return self.session.exec(select(GrievanceReport).where(GrievanceReport.report_id == report_id)).first()

    def complaint_counts(self) -> Dict[str, int]:
        with store_errors(self.session, "complaint_counts"):
            by_status = dict(self.session.exec(
                select(GrievanceReport.status, func.count()).group_by(GrievanceReport.status)
            ).all())
        return {
            "total": int(sum(by_status.values())),
            "pending": int(by_status.get("pending", 0)),
            "resolved": int(by_status.get("resolved", 0)),
        }

    def top_complaints(self, limit: int) -> List[Dict[str, Any]]:
        with store_errors(self.session, "top_complaints"):
            rows = self.session.exec(
                select(GrievanceReport)
                .order_by(level_rank(GrievanceReport.priority_level).desc(), GrievanceReport.created_at.desc())
                .limit(limit)
            ).all()
        return [_pick(r, SUMMARY_FIELDS) for r in rows]

    def top_pending(self, limit: int) -> List[Dict[str, Any]]:
        with store_errors(self.session, "top_pending"):
            rows = self.session.exec(
                self._with_reporter()
                .where(GrievanceReport.status == "pending")
                .order_by(level_rank(GrievanceReport.priority_level).desc(), GrievanceReport.overdue_by.desc())
                .limit(limit)
            ).all()
        return [dict(_pick(r, PENDING_FIELDS), reporter_name=name) for r, name in rows]

    def list_complaints(self, filters: ComplaintFilters, offset: int, limit: int) -> Tuple[List[Dict[str, Any]], int]:
        with store_errors(self.session, "list_complaints"):
            total = self.session.exec(
                self._filtered(select(func.count()).select_from(GrievanceReport), filters)
            ).one()
            rows = self.session.exec(
                self._filtered(self._with_reporter(), filters)
                .order_by(level_rank(GrievanceReport.priority_level).desc(), GrievanceReport.created_at.desc())
                .offset(offset)
                .limit(limit)
            ).all()
        return [dict(_pick(r, LISTING_FIELDS), reporter_name=name) for r, name in rows], int(total)

    def get_grievance(self, report_id: str) -> Optional[GrievanceDto]:
        with store_errors(self.session, "get_grievance"):
            g = self._get_report(report_id)
        if not g:
            return None
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

    def assign_case(self, report_id: str, assigned_to: Optional[str], assigned_department: str,
                    due_date: Optional[datetime], notes: Optional[str]) -> Dict[str, Any]:
        with store_errors(self.session, "assign_case"):
            report = self._get_report(report_id)
            if not report:
                raise NotFoundError("Case not found")
            report.status = "assigned"
            report.assigned_to = assigned_to
            report.assigned_department = assigned_department
            report.updated_at = utcnow()
            assignment = CaseAssignment(
                report_id=report_id,
                assigned_to=assigned_to,
                assigned_department=assigned_department,
                due_date=due_date,
                notes=notes,
                status="assigned",
            )
            self.session.add(report)
            self.session.add(assignment)
            self.session.commit()
            self.session.refresh(assignment)
        return {
            "assignment_id": assignment.assignment_id,
            "report_id": assignment.report_id,
            "assigned_department": assignment.assigned_department,
            "due_date": assignment.due_date,
        }

    def update_case(self, report_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        with store_errors(self.session, "update_case"):
            report = self._get_report(report_id)
            if not report:
                raise NotFoundError("Case not found")
            for name, value in changes.items():
                setattr(report, name, value)
            report.updated_at = utcnow()
            self.session.add(report)
            self.session.commit()
            self.session.refresh(report)
        return {
            "report_id": report.report_id,
            "status": report.status,
            "priority_level": report.priority_level,
            "resolved_at": report.resolved_at,
            "updated_at": report.updated_at,
        }

    def grievance_facts(self) -> List[GrievanceFact]:
        with store_errors(self.session, "grievance_facts"):
            rows = self.session.exec(
                select(
                    GrievanceReport.complaint_category,
                    GrievanceReport.department,
                    GrievanceReport.location_area,
                    GrievanceReport.status,
                    GrievanceReport.created_at,
                    GrievanceReport.resolved_at,
                )
            ).all()
        return [GrievanceFact(*row) for row in rows]

    def average_ai_accuracy(self) -> Optional[float]:
        with store_errors(self.session, "average_ai_accuracy"):
            value = self.session.exec(
                select(func.avg(LearnbotRequest.ai_accuracy)).where(LearnbotRequest.ai_accuracy.is_not(None))
            ).one()
        return float(value) if value is not None else None
