# cyberportal/models.py
from typing import Any, Optional
from datetime import datetime
from enum import Enum
import uuid

from sqlalchemy import Column, DateTime, JSON
from sqlmodel import SQLModel, Field

from .utils import utcnow

# Timestamps are naive UTC (see utils.utcnow), so every datetime column pins plain DateTime.


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


PRIORITY_LEVELS = ("low", "medium", "high", "critical")
SEVERITY_LEVELS = PRIORITY_LEVELS
GRIEVANCE_STATUSES = ("pending", "active", "assigned", "resolved", "closed")
ACTIVE_GRIEVANCE_STATUSES = ("pending", "active", "assigned")
CLOSED_GRIEVANCE_STATUSES = ("resolved", "closed")
ENTITY_TYPES = ("mobile_app", "phone_number", "social_media_id", "upi_id", "website", "other")
ENTITY_STATUSES = ("reported", "investigating", "blocked", "resolved", "false_positive")
LEARNBOT_STATUSES = ("pending", "processing", "completed", "failed")
ASSIGNMENT_STATUSES = ("assigned", "in_progress", "completed", "overdue")


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True, max_length=255)
    national_id: str = Field(max_length=32, unique=True, index=True)
    full_name: str = Field(max_length=255)
    phone: str = Field(max_length=15, unique=True, index=True)
    email: Optional[str] = Field(default=None, max_length=255, unique=True)
    address: str
    password_hash: Optional[str] = Field(default=None)
    role: str = Field(default=Role.USER.value, max_length=10)
    gov_employee_id: Optional[str] = Field(default=None, max_length=50, unique=True)
    profile_image_url: Optional[str] = Field(default=None)
    otp: Optional[str] = Field(default=None, max_length=6)
    otp_expiry: Optional[datetime] = Field(default=None, sa_type=DateTime)
    is_verified: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)


class GrievanceReport(SQLModel, table=True):
    __tablename__ = "grievance_reports"

    report_id: str = Field(primary_key=True, max_length=255)
    user_id: str = Field(foreign_key="users.id", index=True)
    complaint_category: str = Field(max_length=100)
    subcategory: Optional[str] = Field(default=None, max_length=100)
    classification: Optional[str] = Field(default=None, max_length=100)
    department: Optional[str] = Field(default=None, max_length=100)
    description: str
    location: str
    location_area: Optional[str] = Field(default=None, max_length=100)
    suspicious_entity: Optional[str] = Field(default=None)
    anonymity: bool = Field(default=False)
    evidence: Optional[Any] = Field(default=None, sa_column=Column(JSON, nullable=True))
    evidence_count: int = Field(default=0)
    loss_amount: float = Field(default=0.0)
    priority_level: str = Field(default="medium", max_length=20)
    status: str = Field(default="pending", max_length=50, index=True)
    assigned_to: Optional[str] = Field(default=None, max_length=255)
    assigned_department: Optional[str] = Field(default=None, max_length=100)
    ai_summary: Optional[str] = Field(default=None)
    ai_analysis: Optional[Any] = Field(default=None, sa_column=Column(JSON, nullable=True))
    overdue_by: int = Field(default=0)
    resolution_notes: Optional[str] = Field(default=None)
    resolved_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)


class SuspiciousEntity(SQLModel, table=True):
    __tablename__ = "suspicious_entities"

    entity_id: str = Field(primary_key=True, max_length=255)
    user_id: str = Field(foreign_key="users.id", index=True)
    entity_type: str = Field(max_length=100)
    entity_value: str = Field(max_length=255, index=True)
    encounter: str
    description: str
    evidence: Optional[Any] = Field(default=None, sa_column=Column(JSON, nullable=True))
    evidence_count: int = Field(default=0)
    additional_info: Optional[str] = Field(default=None)
    priority_level: str = Field(default="medium", max_length=20)
    confidence_level: float = Field(default=0.0)
    status: str = Field(default="reported", max_length=50)
    threat_level: str = Field(default="medium", max_length=20)
    reported_by_count: int = Field(default=1)
    last_seen: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    blocked_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    investigation_notes: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)


class SecurityAlert(SQLModel, table=True):
    __tablename__ = "security_alerts"

    alert_id: str = Field(primary_key=True, max_length=255)
    user_id: str = Field(foreign_key="users.id", index=True)
    alert_type: str = Field(max_length=100)
    severity: str = Field(max_length=20)
    title: str = Field(max_length=255)
    description: str
    source: Optional[str] = Field(default=None, max_length=100)
    detection_patterns: Optional[Any] = Field(default=None, sa_column=Column(JSON, nullable=True))
    confidence_level: float = Field(default=0.0)
    one_line_explanation: Optional[str] = Field(default=None)
    is_read: bool = Field(default=False)
    action_taken: Optional[str] = Field(default=None, max_length=100)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)


class LearnbotRequest(SQLModel, table=True):
    __tablename__ = "learnbot_requests"

    request_id: str = Field(primary_key=True, max_length=255)
    user_id: str = Field(foreign_key="users.id", index=True)
    request_type: str = Field(max_length=100)
    query: str
    response: Optional[str] = Field(default=None)
    status: str = Field(default="pending", max_length=50)
    processing_time_ms: Optional[int] = Field(default=None)
    model_used: Optional[str] = Field(default=None, max_length=100)
    confidence_score: Optional[float] = Field(default=None)
    ai_accuracy: Optional[float] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)


class CaseAssignment(SQLModel, table=True):
    __tablename__ = "case_assignments"

    assignment_id: Optional[int] = Field(default=None, primary_key=True)
    report_id: str = Field(foreign_key="grievance_reports.report_id", index=True)
    assigned_to: Optional[str] = Field(default=None, max_length=255)
    assigned_department: Optional[str] = Field(default=None, max_length=100)
    assigned_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    due_date: Optional[datetime] = Field(default=None, sa_type=DateTime)
    status: str = Field(default="assigned", max_length=50)
    notes: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)


class IdentityUser(SQLModel, table=True):
    """Users mirrored from the external identity provider's webhook."""

    __tablename__ = "identity_users"

    provider_user_id: str = Field(primary_key=True, max_length=255)
    full_name: str = Field(default="", max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    email: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
