# cyberportal/schemas/auth.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Optional

__all__ = [
    "RegisterRequest",
    "VerifyOTPRequest",
    "LoginRequest",
    "LoginVerifyRequest",
    "LogoutRequest",
]

# Fields stay optional here; the auth service reports missing values with its own messages.


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: Optional[str] = Field(None, max_length=255, description="Citizen's full name")
    national_id: Optional[str] = Field(
        None,
        max_length=32,
        validation_alias=AliasChoices("national_id", "aadhaar_number"),
        description="National identity number (Aadhaar)",
    )
    phone: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("phone", "phone_number"),
        description="Indian mobile number, with or without +91/91/0 prefix",
    )
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    role: Optional[str] = Field(None, description="USER or ADMIN")


class VerifyOTPRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "user_id"))
    otp: Optional[str] = Field(None, description="6-digit code issued at registration")
    password: Optional[str] = Field(None, description="Password to set for the account")


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "user_id"))
    password: Optional[str] = None


class LoginVerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "user_id"))
    otp: Optional[str] = None


class LogoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "user_id"))
