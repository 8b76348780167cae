from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import select

from cyberportal.application.services.admin_service import AdminService, _months_ago
from cyberportal.application.services.report_service import ReportService
from cyberportal.exceptions import ForbiddenError, NotFoundError, ValidationError
from cyberportal.infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import SqlAdminRepository
from cyberportal.infrastructure.persistence.sqlalchemy.repositories.report_repository_sql import SqlReportRepository
from cyberportal.infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository
from cyberportal.models import CaseAssignment, GrievanceReport, LearnbotRequest

from conftest import make_user


@pytest.fixture
def users(session):
    return SqlUserRepository(session)


@pytest.fixture
def admin_svc(session, users):
    return AdminService(
        user_repo=users,
        admin_repo=SqlAdminRepository(session),
        report_repo=SqlReportRepository(session),
        satisfaction_score=4.2,
    )


@pytest.fixture
def filing(session, users):
    return ReportService(user_repo=users, report_repo=SqlReportRepository(session))


@pytest.fixture
def citizen(users):
    return make_user(users, 1)


@pytest.fixture
def admin(users):
    return make_user(users, 9, role="ADMIN")


def _file(filing, user_id, category="UPI Fraud"):
    return filing.report_grievance(user_id, category, "details", "Indore", location_area="Palasia")["report_id"]


def test_months_ago_clamps_day():
    assert _months_ago(datetime(2024, 8, 31, 9), 6) == datetime(2024, 2, 29, 9)
    assert _months_ago(datetime(2024, 3, 15), 12) == datetime(2023, 3, 15)


def test_admin_routes_require_admin_role(admin_svc, citizen):
    with pytest.raises(ForbiddenError) as exc:
        admin_svc.dashboard(citizen.id)
    assert exc.value.message == "Access denied. Admin role required."
    with pytest.raises(NotFoundError):
        admin_svc.analytics("missing")


def test_dashboard(admin_svc, admin, citizen, filing, session):
    first = _file(filing, citizen.id)
    second = _file(filing, citizen.id, "Phishing")
    admin_svc.update_case(admin.id, second, priority_level="critical")

    data = admin_svc.dashboard(admin.id)

    assert data["admin_info"] == {
        "id": admin.id,
        "gov_employee_id": None,
        "name": admin.full_name,
        "place": admin.address,
    }
    complaints = data["complaints"]
    assert (complaints["total"], complaints["pending"], complaints["resolved"]) == (2, 2, 0)
    assert [c["report_id"] for c in complaints["top_5"]] == [second, first]
    assert complaints["top_3_pending"][0]["reporter_name"] == citizen.full_name


def test_list_complaints_filters_and_paginates(admin_svc, admin, citizen, filing):
    ids = [_file(filing, citizen.id) for _ in range(5)]
    admin_svc.update_case(admin.id, ids[2], priority_level="high")
    admin_svc.update_case(admin.id, ids[4], status="resolved")

    page = admin_svc.list_complaints(admin.id, page=1, limit=2)
    assert page["pagination"] == {"current_page": 1, "total_pages": 3, "total_records": 5, "records_per_page": 2}
    assert page["complaints"][0]["report_id"] == ids[2]
    assert page["complaints"][0]["reporter_name"] == citizen.full_name

    resolved = admin_svc.list_complaints(admin.id, status="resolved")
    assert [c["report_id"] for c in resolved["complaints"]] == [ids[4]]
    assert resolved["pagination"]["total_pages"] == 1

    high = admin_svc.list_complaints(admin.id, priority="high")
    assert high["pagination"]["total_records"] == 1

    empty = admin_svc.list_complaints(admin.id, department="Cyber Cell")
    assert empty["complaints"] == [] and empty["pagination"]["total_pages"] == 0

    with pytest.raises(ValidationError):
        admin_svc.list_complaints(admin.id, page=0)
    with pytest.raises(ValidationError):
        admin_svc.list_complaints(admin.id, limit=1000)


def test_assign_case(admin_svc, admin, citizen, filing, session):
    report_id = _file(filing, citizen.id)
    # clients may send an offset; it is stored as naive UTC
    due = datetime(2024, 6, 1, 15, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))

    assignment = admin_svc.assign_case(admin.id, report_id, "Cyber Cell", assigned_to="Inspector Rao", due_date=due)

    assert assignment["report_id"] == report_id
    assert assignment["assigned_department"] == "Cyber Cell"
    assert assignment["due_date"] == datetime(2024, 6, 1, 10, 0)
    report = session.get(GrievanceReport, report_id)
    session.refresh(report)
    assert report.status == "assigned"
    assert report.assigned_to == "Inspector Rao"
    rows = session.exec(select(CaseAssignment).where(CaseAssignment.report_id == report_id)).all()
    assert len(rows) == 1 and rows[0].status == "assigned"


def test_assign_case_validation(admin_svc, admin):
    with pytest.raises(ValidationError) as exc:
        admin_svc.assign_case(admin.id, "GR-1", None)
    assert exc.value.message == "Report ID and assigned department are required"
    with pytest.raises(NotFoundError):
        admin_svc.assign_case(admin.id, "GR-missing", "Cyber Cell")


def test_update_case_resolution_stamps_time(admin_svc, admin, citizen, filing):
    report_id = _file(filing, citizen.id)
    updated = admin_svc.update_case(
        admin.id, report_id, status="resolved", resolution_notes="Refund issued", ai_analysis={"risk": "low"}
    )
    assert updated["status"] == "resolved"
    assert updated["resolved_at"] is not None

    reopened = admin_svc.update_case(admin.id, report_id, priority_level="low")
    assert reopened["priority_level"] == "low"


def test_update_case_rejects_bad_values(admin_svc, admin, citizen, filing):
    report_id = _file(filing, citizen.id)
    with pytest.raises(ValidationError):
        admin_svc.update_case(admin.id, report_id, status="archived")
    with pytest.raises(ValidationError):
        admin_svc.update_case(admin.id, report_id, priority_level="urgent")
    with pytest.raises(ValidationError):
        admin_svc.update_case(admin.id, report_id)
    with pytest.raises(NotFoundError):
        admin_svc.update_case(admin.id, "GR-missing", status="closed")


def test_analytics(admin_svc, admin, citizen, filing, session):
    resolved_id = _file(filing, citizen.id)
    _file(filing, citizen.id, "Phishing")
    report = session.get(GrievanceReport, resolved_id)
    report.status = "resolved"
    report.department = "Cyber Cell"
    report.resolved_at = report.created_at + timedelta(hours=36)
    session.add(report)
    session.add(LearnbotRequest(request_id="LB-1", user_id=citizen.id, request_type="faq", query="q", ai_accuracy=0.9))
    session.commit()

    data = admin_svc.analytics(admin.id)

    assert data["metrics"] == {
        "avg_resolution_time": "36.00",
        "resolution_rate": "50.00",
        "satisfaction_score": "4.20",
        "ai_accuracy": "0.90",
    }
    assert data["department_performance"] == [
        {"department": "Cyber Cell", "total_cases": 1, "resolved_cases": 1, "resolution_rate": 100.0}
    ]
    assert data["cases_by_area"] == [{"location_area": "Palasia", "total_cases": 2, "resolved_cases": 1}]
    assert {row["complaint_category"] for row in data["crime_type_analytics"]} == {"UPI Fraud", "Phishing"}
    assert data["resolution_trends"][0]["total_cases"] == 2
    assert sum(row["count"] for row in data["monthly_trends"]) == 2


def test_create_alert_for_user(admin_svc, admin, citizen):
    alert = admin_svc.create_alert(admin.id, citizen.id, "phishing", "high", "Suspicious SMS", "Do not click the link")
    assert alert["alert_id"].startswith("SA-")
    assert alert["user_id"] == citizen.id
    assert alert["is_read"] is False

    with pytest.raises(ValidationError):
        admin_svc.create_alert(admin.id, citizen.id, "phishing", "extreme", "t", "d")
    with pytest.raises(NotFoundError):
        admin_svc.create_alert(admin.id, "missing", "phishing", "low", "t", "d")
