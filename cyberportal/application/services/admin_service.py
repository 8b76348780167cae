import calendar
import logging
import math
from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from .access import require_role
from ..ports.admin_repo import AdminRepository, ComplaintFilters, GrievanceFact
from ..ports.report_repo import ReportRepository
from ..ports.user_repo import UserRepository
from ...exceptions import NotFoundError, ValidationError
from ...models import CLOSED_GRIEVANCE_STATUSES, GRIEVANCE_STATUSES, PRIORITY_LEVELS, SEVERITY_LEVELS, Role
from ...utils import generate_reference_id, to_naive_utc, utcnow

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _months_ago(now: datetime, months: int) -> datetime:
    year, month = divmod(now.year * 12 + (now.month - 1) - months, 12)
    month += 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def _rate(part: int, whole: int) -> float:
    return round(part * 100.0 / whole, 2) if whole else 0.0


def _fmt(value: Optional[float]) -> str:
    return f"{(value or 0):.2f}"


def _month(d: datetime) -> str:
    return d.strftime("%Y-%m")


def _grouped(facts: Iterable[GrievanceFact], key: Callable[[GrievanceFact], Optional[str]], name: str) -> List[Dict[str, Any]]:
    totals: Dict[str, List[int]] = defaultdict(lambda: [0, 0])
    for fact in facts:
        value = key(fact)
        if value is None:
            continue
        totals[value][0] += 1
        if fact.status == "resolved":
            totals[value][1] += 1
    return [
        {name: value, "total_cases": total, "resolved_cases": resolved, "resolution_rate": _rate(resolved, total)}
        for value, (total, resolved) in totals.items()
    ]


@dataclass
class AdminService:
    user_repo: UserRepository
    admin_repo: AdminRepository
    report_repo: ReportRepository
    satisfaction_score: float = 4.2
    clock: Callable[[], datetime] = utcnow

    def dashboard(self, admin_id: str) -> Dict[str, Any]:
        admin = require_role(self.user_repo, admin_id, Role.ADMIN)
        counts = self.admin_repo.complaint_counts()
        return {
            "admin_info": {
                "id": admin.id,
                "gov_employee_id": admin.gov_employee_id,
                "name": admin.full_name,
                "place": admin.address,
            },
            "complaints": {
                "total": counts["total"],
                "pending": counts["pending"],
                "resolved": counts["resolved"],
                "top_5": self.admin_repo.top_complaints(5),
                "top_3_pending": self.admin_repo.top_pending(3),
            },
        }

    def analytics(self, admin_id: str) -> Dict[str, Any]:
        require_role(self.user_repo, admin_id, Role.ADMIN)
        facts = self.admin_repo.grievance_facts()
        now = self.clock()

        resolved = [f for f in facts if f.status == "resolved"]
        hours = [
            (f.resolved_at - f.created_at).total_seconds() / 3600
            for f in resolved
            if f.resolved_at is not None
        ]
        avg_hours = sum(hours) / len(hours) if hours else 0.0

        departments = sorted(
            _grouped(facts, lambda f: f.department, "department"),
            key=lambda row: row["resolution_rate"],
            reverse=True,
        )
        areas = sorted(
            _grouped(facts, lambda f: f.location_area, "location_area"),
            key=lambda row: row["total_cases"],
            reverse=True,
        )[:10]
        for row in areas:
            del row["resolution_rate"]
        crime_types = sorted(
            _grouped(facts, lambda f: f.complaint_category, "complaint_category"),
            key=lambda row: row["total_cases"],
            reverse=True,
        )

        return {
            "metrics": {
                "avg_resolution_time": _fmt(avg_hours),
                "resolution_rate": _fmt(_rate(len(resolved), len(facts))),
                "satisfaction_score": _fmt(self.satisfaction_score),
                "ai_accuracy": _fmt(self.admin_repo.average_ai_accuracy()),
            },
            "department_performance": departments,
            "resolution_trends": self._resolution_trends(facts, _months_ago(now, 6)),
            "cases_by_area": areas,
            "crime_type_analytics": crime_types,
            "monthly_trends": self._monthly_trends(facts, _months_ago(now, 12)),
        }

    @staticmethod
    def _resolution_trends(facts: List[GrievanceFact], since: datetime) -> List[Dict[str, Any]]:
        per_month: Dict[str, List[int]] = defaultdict(lambda: [0, 0])
        for fact in facts:
            if fact.created_at < since:
                continue
            bucket = per_month[_month(fact.created_at)]
            bucket[0] += 1
            if fact.status == "resolved":
                bucket[1] += 1
        return [
            {"month": month, "total_cases": total, "resolved_cases": done}
            for month, (total, done) in sorted(per_month.items(), reverse=True)
        ]

    @staticmethod
    def _monthly_trends(facts: List[GrievanceFact], since: datetime) -> List[Dict[str, Any]]:
        counts: Dict[tuple, int] = defaultdict(int)
        for fact in facts:
            if fact.created_at >= since:
                counts[(_month(fact.created_at), fact.complaint_category)] += 1
        rows = [
            {"month": month, "complaint_category": category, "count": n}
            for (month, category), n in counts.items()
        ]
        rows.sort(key=lambda row: row["count"], reverse=True)
        rows.sort(key=lambda row: row["month"], reverse=True)
        return rows

    def list_complaints(self, admin_id: str, status: Optional[str] = None, department: Optional[str] = None,
                        priority: Optional[str] = None, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        require_role(self.user_repo, admin_id, Role.ADMIN)
        if page < 1:
            raise ValidationError("page must be at least 1")
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

        filters = ComplaintFilters(status=status or None, department=department or None, priority=priority or None)
        rows, total = self.admin_repo.list_complaints(filters, offset=(page - 1) * limit, limit=limit)
        return {
            "complaints": rows,
            "pagination": {
                "current_page": page,
                "total_pages": math.ceil(total / limit),
                "total_records": total,
                "records_per_page": limit,
            },
        }

    def assign_case(self, admin_id: str, report_id: Optional[str], assigned_department: Optional[str],
                    assigned_to: Optional[str] = None, due_date: Optional[datetime] = None,
                    notes: Optional[str] = None) -> Dict[str, Any]:
        require_role(self.user_repo, admin_id, Role.ADMIN)
        if not report_id or not assigned_department:
            raise ValidationError("Report ID and assigned department are required")
        if self.admin_repo.get_grievance(report_id) is None:
            raise NotFoundError("Case not found")

        assignment = self.admin_repo.assign_case(
            report_id, assigned_to or None, assigned_department, to_naive_utc(due_date), notes or None
        )
        logger.info(f"Case {report_id} assigned to {assigned_department} by admin {admin_id}")
        return assignment

    def update_case(self, admin_id: str, report_id: str, status: Optional[str] = None,
                    priority_level: Optional[str] = None, ai_summary: Optional[str] = None,
                    ai_analysis: Any = None, resolution_notes: Optional[str] = None) -> Dict[str, Any]:
        require_role(self.user_repo, admin_id, Role.ADMIN)
        if status is not None and status not in GRIEVANCE_STATUSES:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(GRIEVANCE_STATUSES)}")
        if priority_level is not None and priority_level not in PRIORITY_LEVELS:
            raise ValidationError(f"Invalid priority level. Must be one of: {', '.join(PRIORITY_LEVELS)}")

        changes: Dict[str, Any] = {
            name: value
            for name, value in (
                ("status", status),
                ("priority_level", priority_level),
                ("ai_summary", ai_summary),
                ("ai_analysis", ai_analysis),
                ("resolution_notes", resolution_notes),
            )
            if value is not None
        }
        if not changes:
            raise ValidationError("No case fields to update")
        if status in CLOSED_GRIEVANCE_STATUSES:
            changes["resolved_at"] = self.clock()

        if self.admin_repo.get_grievance(report_id) is None:
            raise NotFoundError("Case not found")
        updated = self.admin_repo.update_case(report_id, changes)
        logger.info(f"Case {report_id} updated by admin {admin_id}: {sorted(changes)}")
        return updated

    def create_alert(self, admin_id: str, user_id: str, alert_type: Optional[str], severity: Optional[str],
                     title: Optional[str], description: Optional[str], source: Optional[str] = None,
                     one_line_explanation: Optional[str] = None, confidence_level: float = 0.0) -> Dict[str, Any]:
        require_role(self.user_repo, admin_id, Role.ADMIN)
        if not alert_type or not severity or not title or not description:
            raise ValidationError("Alert type, severity, title, and description are required")
        if severity not in SEVERITY_LEVELS:
            raise ValidationError(f"Invalid severity. Must be one of: {', '.join(SEVERITY_LEVELS)}")
        if self.user_repo.get_by_id(user_id) is None:
            raise NotFoundError("User not found")

        alert = self.report_repo.create_alert(
            generate_reference_id("SA"),
            user_id,
            {
                "alert_type": alert_type,
                "severity": severity,
                "title": title,
                "description": description,
                "source": source or "admin",
                "one_line_explanation": one_line_explanation,
                "confidence_level": confidence_level,
            },
        )
        return asdict(alert)
