from fastapi import APIRouter, Depends, Query

from .deps import get_learnbot_service, get_portal_service, get_report_service
from ..application.services.learnbot_service import LearnbotService
from ..application.services.portal_service import PortalService
from ..application.services.report_service import ReportService
from ..exceptions import create_success_response
from ..schemas import (
    APIResponse,
    ErrorResponse,
    GrievanceRequest,
    LearnbotRequestBody,
    ProfileUpdateRequest,
    SuspiciousEntityRequest,
)

router = APIRouter(
    prefix="/api/user",
    tags=["User"],
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.get("/{user_id}", response_model=APIResponse)
def dashboard(user_id: str, service: PortalService = Depends(get_portal_service)):
    return create_success_response(service.dashboard(user_id), "User dashboard data retrieved successfully")


@router.get("/{user_id}/profile", response_model=APIResponse)
def get_profile(user_id: str, service: PortalService = Depends(get_portal_service)):
    return create_success_response(service.profile(user_id), "User profile retrieved successfully")


@router.put("/{user_id}/profile", response_model=APIResponse)
def update_profile(user_id: str, body: ProfileUpdateRequest, service: PortalService = Depends(get_portal_service)):
    profile = service.update_profile(
        user_id,
        full_name=body.full_name,
        email=body.email,
        address=body.address,
        profile_image_url=body.profile_image_url,
    )
    return create_success_response(profile, "Profile updated successfully")


@router.post("/{user_id}/report_grievance", status_code=201, response_model=APIResponse)
def report_grievance(user_id: str, body: GrievanceRequest, service: ReportService = Depends(get_report_service)):
    report = service.report_grievance(
        user_id,
        complaint_category=body.complaint_category,
        description=body.description,
        location=body.location,
        subcategory=body.subcategory,
        location_area=body.location_area,
        suspicious_entity=body.suspicious_entity,
        anonymity=body.anonymity,
        evidence=body.evidence,
        loss_amount=body.loss_amount,
    )
    return create_success_response(report, "Grievance reported successfully")


@router.post("/{user_id}/report_suspicious", status_code=201, response_model=APIResponse)
def report_suspicious(user_id: str, body: SuspiciousEntityRequest, service: ReportService = Depends(get_report_service)):
    entity = service.report_suspicious(
        user_id,
        entity_type=body.entity_type,
        entity_value=body.entity_value,
        encounter=body.encounter,
        description=body.description,
        evidence=body.evidence,
        additional_info=body.additional_info,
    )
    return create_success_response(entity, "Suspicious entity reported successfully")


@router.get("/{user_id}/cd_track_complete", response_model=APIResponse)
def case_tracking(user_id: str, service: PortalService = Depends(get_portal_service)):
    return create_success_response(service.case_tracking(user_id), "Case tracking data retrieved successfully")


@router.get("/{user_id}/alerts", response_model=APIResponse)
def list_alerts(user_id: str, unread_only: bool = Query(False), service: PortalService = Depends(get_portal_service)):
    return create_success_response(service.alerts(user_id, unread_only=unread_only), "Security alerts retrieved successfully")


@router.post("/{user_id}/alerts/read-all", response_model=APIResponse)
def mark_all_alerts_read(user_id: str, service: PortalService = Depends(get_portal_service)):
    updated = service.mark_all_alerts_read(user_id)
    return create_success_response({"updated": updated}, "All alerts marked as read")


@router.post("/{user_id}/alerts/{alert_id}/read", response_model=APIResponse)
def mark_alert_read(user_id: str, alert_id: str, service: PortalService = Depends(get_portal_service)):
    service.mark_alert_read(user_id, alert_id)
    return create_success_response({"alert_id": alert_id, "is_read": True}, "Alert marked as read")


@router.get("/{user_id}/learnbot", response_model=APIResponse)
def learnbot_history(user_id: str, service: LearnbotService = Depends(get_learnbot_service)):
    return create_success_response(service.history(user_id), "Learning bot requests retrieved successfully")


@router.post("/{user_id}/learnbot", status_code=201, response_model=APIResponse)
def learnbot_ask(user_id: str, body: LearnbotRequestBody, service: LearnbotService = Depends(get_learnbot_service)):
    request = service.ask(user_id, body.request_type, body.query)
    return create_success_response(request, "Learning bot request created successfully")
