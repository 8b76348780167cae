from typing import Optional

from fastapi import APIRouter, Depends, Query

from .deps import get_admin_service
from ..application.services.admin_service import AdminService
from ..exceptions import create_success_response
from ..schemas import APIResponse, AssignCaseRequest, CreateAlertRequest, ErrorResponse, UpdateCaseRequest

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.get("/{user_id}", response_model=APIResponse)
def dashboard(user_id: str, service: AdminService = Depends(get_admin_service)):
    return create_success_response(service.dashboard(user_id), "Admin dashboard data retrieved successfully")


@router.get("/{user_id}/analytics", response_model=APIResponse)
def analytics(user_id: str, service: AdminService = Depends(get_admin_service)):
    return create_success_response(service.analytics(user_id), "Analytics data retrieved successfully")


@router.get("/{user_id}/complaints", response_model=APIResponse)
def list_complaints(
    user_id: str,
    status: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(20),
    service: AdminService = Depends(get_admin_service),
):
    result = service.list_complaints(
        user_id, status=status, department=department, priority=priority, page=page, limit=limit
    )
    return create_success_response(result, "Complaints retrieved successfully")


@router.post("/{user_id}/assign-case", response_model=APIResponse)
def assign_case(user_id: str, body: AssignCaseRequest, service: AdminService = Depends(get_admin_service)):
    assignment = service.assign_case(
        user_id,
        report_id=body.report_id,
        assigned_department=body.assigned_department,
        assigned_to=body.assigned_to,
        due_date=body.due_date,
        notes=body.notes,
    )
    return create_success_response(assignment, "Case assigned successfully")


@router.put("/{user_id}/update-case/{report_id}", response_model=APIResponse)
def update_case(user_id: str, report_id: str, body: UpdateCaseRequest, service: AdminService = Depends(get_admin_service)):
    updated = service.update_case(
        user_id,
        report_id,
        status=body.status,
        priority_level=body.priority_level,
        ai_summary=body.ai_summary,
        ai_analysis=body.ai_analysis,
        resolution_notes=body.resolution_notes,
    )
    return create_success_response(updated, "Case updated successfully")


@router.post("/{user_id}/alerts", status_code=201, response_model=APIResponse)
def create_alert(user_id: str, body: CreateAlertRequest, service: AdminService = Depends(get_admin_service)):
    alert = service.create_alert(
        user_id,
        body.user_id,
        alert_type=body.alert_type,
        severity=body.severity,
        title=body.title,
        description=body.description,
        source=body.source,
        one_line_explanation=body.one_line_explanation,
        confidence_level=body.confidence_level,
    )
    return create_success_response(alert, "Security alert created successfully")
