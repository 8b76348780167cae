# cyberportal/schemas/admin.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Optional

__all__ = ["AssignCaseRequest", "UpdateCaseRequest", "CreateAlertRequest"]


class AssignCaseRequest(BaseModel):
    report_id: Optional[str] = None
    assigned_department: Optional[str] = Field(None, max_length=100)
    assigned_to: Optional[str] = Field(None, max_length=255)
    due_date: Optional[datetime] = None
    notes: Optional[str] = None


class UpdateCaseRequest(BaseModel):
    status: Optional[str] = None
    priority_level: Optional[str] = None
    ai_summary: Optional[str] = None
    ai_analysis: Any = None
    resolution_notes: Optional[str] = None


class CreateAlertRequest(BaseModel):
    user_id: str
    alert_type: Optional[str] = Field(None, max_length=100)
    severity: Optional[str] = None
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    source: Optional[str] = Field(None, max_length=100)
    one_line_explanation: Optional[str] = None
    confidence_level: float = Field(0.0, ge=0, le=1)
