from collections import Counter
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .access import require_role
from ..ports.report_repo import ReportRepository, UserReportStats
from ..ports.user_repo import UserRepository
from ...exceptions import NotFoundError, ValidationError
from ...models import Role

RECENT_MONTHS = 6
TOP_AREAS = 5


def safety_score(stats: UserReportStats) -> int:
    """100 for a clean record, minus 10 per unresolved grievance and 5 per open entity."""
    if stats.total == 0:
        return 100
    return max(0, 100 - 10 * stats.unresolved - 5 * stats.open_entities)


def month_buckets(dates: Iterable[datetime], limit: int) -> List[Dict[str, Any]]:
    """Count dates per calendar month, most recent month first."""
    counts = Counter(d.strftime("%Y-%m") for d in dates if d is not None)
    return [{"month": month, "count": counts[month]} for month in sorted(counts, reverse=True)[:limit]]


@dataclass
class PortalService:
    """Read-side views of a citizen's account: dashboard, profile, cases and alerts."""

    user_repo: UserRepository
    report_repo: ReportRepository

    def dashboard(self, user_id: str) -> Dict[str, Any]:
        user = require_role(self.user_repo, user_id, Role.USER)
        stats = self.report_repo.user_stats(user_id)
        alerts = self.report_repo.list_alerts(user_id, limit=2)
        return {
            "id": user.id,
            "phone": user.phone,
            "file_report": stats.total,
            "threat_blocked": stats.threats_blocked,
            "safety_score": safety_score(stats),
            "case_statistics": {
                "total_cases": stats.total,
                "pending_cases": stats.pending,
                "resolved_cases": stats.resolved,
            },
            "security_alerts": [
                {
                    "alert_id": a.alert_id,
                    "alert_type": a.alert_type,
                    "severity": a.severity,
                    "created_at": a.created_at,
                    "description": a.description,
                }
                for a in alerts
            ],
            "threats_blocked": self.report_repo.top_blocked_entities(user_id, 2),
            "cybercrime_analytics": {
                "type_wise": self.report_repo.grievance_counts_by(user_id, "complaint_category"),
                "time_wise": month_buckets(self.report_repo.grievance_created_dates(user_id), RECENT_MONTHS),
                "area_wise": self.report_repo.grievance_counts_by(user_id, "location_area", limit=TOP_AREAS),
            },
        }

    def profile(self, user_id: str) -> Dict[str, Any]:
        user = require_role(self.user_repo, user_id, Role.USER)
        return {
            "id": user.id,
            "full_name": user.full_name,
            "phone": user.phone,
            "email": user.email,
            "address": user.address,
            "national_id": user.national_id,
            "profile_image_url": user.profile_image_url,
        }

    def update_profile(self, user_id: str, full_name: Optional[str] = None, email: Optional[str] = None,
                       address: Optional[str] = None, profile_image_url: Optional[str] = None) -> Dict[str, Any]:
        require_role(self.user_repo, user_id, Role.USER)
        changes = {
            "full_name": full_name,
            "email": email,
            "address": address,
            "profile_image_url": profile_image_url,
        }
        for name, value in changes.items():
            if value is not None and not value.strip():
                raise ValidationError(f"{name} cannot be empty")
        if all(value is None for value in changes.values()):
            raise ValidationError("No profile fields to update")
        if email is not None and "@" not in email:
            raise ValidationError("Invalid email address")

        updated = self.user_repo.update_profile_fields(
            user_id,
            full_name=full_name.strip() if full_name else None,
            email=email.strip() if email else None,
            address=address.strip() if address else None,
            profile_image_url=profile_image_url.strip() if profile_image_url else None,
        )
        if updated is None:
            raise NotFoundError("User not found")
        return self.profile(user_id)

    def case_tracking(self, user_id: str) -> Dict[str, Any]:
        require_role(self.user_repo, user_id, Role.USER)
        stats = self.report_repo.user_stats(user_id)
        return {
            "active": stats.active,
            "resolved": stats.resolved + stats.closed,
            "total": stats.total,
            "top_3_active": self.report_repo.top_active_grievances(user_id, 3),
        }

    def alerts(self, user_id: str, unread_only: bool = False) -> List[Dict[str, Any]]:
        require_role(self.user_repo, user_id, Role.USER)
        return [asdict(a) for a in self.report_repo.list_alerts(user_id, unread_only=unread_only)]

    def mark_alert_read(self, user_id: str, alert_id: str) -> None:
        require_role(self.user_repo, user_id, Role.USER)
        if not self.report_repo.mark_alert_read(user_id, alert_id):
            raise NotFoundError("Alert not found")

    def mark_all_alerts_read(self, user_id: str) -> int:
        require_role(self.user_repo, user_id, Role.USER)
        return self.report_repo.mark_all_alerts_read(user_id)
