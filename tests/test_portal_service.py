from datetime import datetime

import pytest

from cyberportal.application.ports.report_repo import UserReportStats
from cyberportal.application.services.portal_service import PortalService, month_buckets, safety_score
from cyberportal.application.services.report_service import ReportService
from cyberportal.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from cyberportal.infrastructure.persistence.sqlalchemy.repositories.report_repository_sql import SqlReportRepository
from cyberportal.infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository
from cyberportal.models import SuspiciousEntity
from cyberportal.utils import utcnow

from conftest import make_user


@pytest.fixture
def users(session):
    return SqlUserRepository(session)


@pytest.fixture
def reports(session):
    return SqlReportRepository(session)


@pytest.fixture
def portal(users, reports):
    return PortalService(user_repo=users, report_repo=reports)


@pytest.fixture
def filing(users, reports):
    return ReportService(user_repo=users, report_repo=reports)


def _grievance(filing, user_id, **overrides):
    data = dict(
        complaint_category="UPI Fraud",
        description="Money debited after a fake refund call",
        location="Indore",
        location_area="Vijay Nagar",
    )
    data.update(overrides)
    return filing.report_grievance(user_id, **data)


def test_safety_score_rules():
    clean = UserReportStats(total=0, pending=0, active=0, resolved=0, closed=0, threats_blocked=0, open_entities=3)
    assert safety_score(clean) == 100

    some = UserReportStats(total=3, pending=2, active=2, resolved=1, closed=0, threats_blocked=0, open_entities=1)
    assert safety_score(some) == 100 - 20 - 5

    many = UserReportStats(total=20, pending=20, active=20, resolved=0, closed=0, threats_blocked=0, open_entities=0)
    assert safety_score(many) == 0


def test_month_buckets_most_recent_first():
    dates = [datetime(2024, m, 3) for m in (1, 2, 2, 3, 4, 5, 6, 7)]
    buckets = month_buckets(dates, 6)
    assert buckets[0] == {"month": "2024-07", "count": 1}
    assert {"month": "2024-02", "count": 2} in buckets
    assert len(buckets) == 6
    assert all(b["month"] != "2024-01" for b in buckets)


def test_report_grievance(filing, users):
    user = make_user(users)
    report = _grievance(filing, user.id, evidence=["a.png", "b.png"], loss_amount=2500)

    assert report["report_id"].startswith("GR-")
    assert report["status"] == "pending"
    assert report["complaint_category"] == "UPI Fraud"


def test_report_grievance_requires_fields(filing, users):
    user = make_user(users)
    with pytest.raises(ValidationError) as exc:
        _grievance(filing, user.id, description="  ")
    assert exc.value.message == "Complaint category, description, and location are required"


def test_routes_require_user_role(filing, portal, users):
    admin = make_user(users, 2, role="ADMIN")
    with pytest.raises(ForbiddenError) as exc:
        _grievance(filing, admin.id)
    assert exc.value.message == "Access denied. User role required."
    with pytest.raises(NotFoundError):
        portal.dashboard("missing")


def test_report_suspicious_counts_similar_reports(filing, users, session):
    first_user = make_user(users, 1)
    second_user = make_user(users, 2)
    entity = dict(entity_type="upi_id", entity_value="fraud@okaxis", encounter="SMS", description="Asked for a refund")

    first = filing.report_suspicious(first_user.id, **entity)
    second = filing.report_suspicious(second_user.id, **entity)

    assert first["entity_id"].startswith("SE-")
    assert first["status"] == "reported"
    assert first["threat_level"] == "medium"
    assert first["similar_reports"] == 0
    assert second["similar_reports"] == 1

    earlier = session.get(SuspiciousEntity, first["entity_id"])
    session.refresh(earlier)
    assert earlier.reported_by_count == 2
    assert session.get(SuspiciousEntity, second["entity_id"]).reported_by_count == 2


def test_report_suspicious_rejects_unknown_type(filing, users):
    user = make_user(users)
    with pytest.raises(ValidationError):
        filing.report_suspicious(user.id, "email", "x@example.com", "mail", "phishing")


def test_dashboard_aggregates(filing, portal, users, reports, session):
    user = make_user(users)
    _grievance(filing, user.id)
    _grievance(filing, user.id, complaint_category="Phishing", location_area="Palasia")
    filing.report_suspicious(user.id, "website", "fake-bank.example", "email link", "cloned login page")
    blocked = filing.report_suspicious(user.id, "phone_number", "+919000000000", "call", "impersonation")
    entity = session.get(SuspiciousEntity, blocked["entity_id"])
    entity.status = "blocked"
    entity.blocked_at = utcnow()
    session.add(entity)
    session.commit()
    reports.create_alert("SA-1", user.id, {"alert_type": "phishing", "severity": "low", "title": "t1", "description": "d1"})
    reports.create_alert("SA-2", user.id, {"alert_type": "fraud", "severity": "critical", "title": "t2", "description": "d2"})
    reports.create_alert("SA-3", user.id, {"alert_type": "fraud", "severity": "high", "title": "t3", "description": "d3"})

    data = portal.dashboard(user.id)

    assert data["id"] == user.id
    assert data["phone"] == user.phone
    assert data["file_report"] == 2
    assert data["threat_blocked"] == 1
    # two unresolved grievances, one entity neither blocked nor resolved
    assert data["safety_score"] == 100 - 20 - 5
    assert data["case_statistics"] == {"total_cases": 2, "pending_cases": 2, "resolved_cases": 0}
    assert [a["alert_id"] for a in data["security_alerts"]] == ["SA-2", "SA-3"]
    assert [t["entity_id"] for t in data["threats_blocked"]] == [blocked["entity_id"]]
    analytics = data["cybercrime_analytics"]
    assert {row["complaint_category"] for row in analytics["type_wise"]} == {"UPI Fraud", "Phishing"}
    assert analytics["time_wise"] == [{"month": utcnow().strftime("%Y-%m"), "count": 2}]
    assert len(analytics["area_wise"]) == 2


def test_case_tracking(filing, portal, users, session):
    from cyberportal.models import GrievanceReport

    user = make_user(users)
    low = _grievance(filing, user.id)
    high = _grievance(filing, user.id)
    done = _grievance(filing, user.id)
    for report_id, changes in ((high["report_id"], {"priority_level": "high"}), (done["report_id"], {"status": "closed"})):
        row = session.get(GrievanceReport, report_id)
        for name, value in changes.items():
            setattr(row, name, value)
        session.add(row)
    session.commit()

    data = portal.case_tracking(user.id)

    assert data["active"] == 2
    assert data["resolved"] == 1
    assert data["total"] == 3
    assert [c["report_id"] for c in data["top_3_active"]] == [high["report_id"], low["report_id"]]


def test_profile_read_and_update(portal, users):
    user = make_user(users)
    make_user(users, 2)

    profile = portal.profile(user.id)
    assert profile["national_id"] == user.national_id
    assert profile["profile_image_url"] is None

    updated = portal.update_profile(user.id, address="Rau, Indore", profile_image_url="https://img.example/p.png")
    assert updated["address"] == "Rau, Indore"
    assert updated["profile_image_url"] == "https://img.example/p.png"

    with pytest.raises(ConflictError):
        portal.update_profile(user.id, email="citizen2@example.com")
    with pytest.raises(ValidationError):
        portal.update_profile(user.id)
    with pytest.raises(ValidationError):
        portal.update_profile(user.id, email="not-an-email")


def test_alerts_read_flow(portal, users, reports):
    user = make_user(users)
    other = make_user(users, 2)
    reports.create_alert("SA-1", user.id, {"alert_type": "fraud", "severity": "high", "title": "t", "description": "d"})
    reports.create_alert("SA-2", user.id, {"alert_type": "fraud", "severity": "low", "title": "t", "description": "d"})
    reports.create_alert("SA-3", other.id, {"alert_type": "fraud", "severity": "low", "title": "t", "description": "d"})

    assert len(portal.alerts(user.id)) == 2

    portal.mark_alert_read(user.id, "SA-1")
    unread = portal.alerts(user.id, unread_only=True)
    assert [a["alert_id"] for a in unread] == ["SA-2"]

    with pytest.raises(NotFoundError):
        portal.mark_alert_read(user.id, "SA-3")

    assert portal.mark_all_alerts_read(user.id) == 1
    assert portal.alerts(user.id, unread_only=True) == []
    assert len(portal.alerts(other.id, unread_only=True)) == 1
