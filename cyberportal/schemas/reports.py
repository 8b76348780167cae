# cyberportal/schemas/reports.py
from pydantic import BaseModel, Field
from typing import Any, Optional

__all__ = [
    "GrievanceRequest",
    "SuspiciousEntityRequest",
    "ProfileUpdateRequest",
    "LearnbotRequestBody",
]


class GrievanceRequest(BaseModel):
    complaint_category: Optional[str] = Field(None, max_length=100)
    subcategory: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    location: Optional[str] = None
    location_area: Optional[str] = Field(None, max_length=100)
    suspicious_entity: Optional[str] = None
    anonymity: bool = False
    evidence: Any = None
    loss_amount: Optional[float] = Field(None, ge=0)


class SuspiciousEntityRequest(BaseModel):
    entity_type: Optional[str] = Field(None, description="mobile_app, phone_number, social_media_id, upi_id, website or other")
    entity_value: Optional[str] = Field(None, max_length=255)
    encounter: Optional[str] = None
    description: Optional[str] = None
    evidence: Any = None
    additional_info: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    profile_image_url: Optional[str] = None


class LearnbotRequestBody(BaseModel):
    request_type: Optional[str] = Field(None, max_length=100)
    query: Optional[str] = None
