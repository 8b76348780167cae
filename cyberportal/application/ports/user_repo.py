from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol


@dataclass
class CredentialRecord:
    id: str
    full_name: str
    national_id: str
    phone: str
    email: Optional[str]
    address: str
    role: str
    password_hash: Optional[str]
    otp: Optional[str]
    otp_expiry: Optional[datetime]
    is_verified: bool
    created_at: datetime
    updated_at: datetime
    gov_employee_id: Optional[str] = None
    profile_image_url: Optional[str] = None


class UserRepository(Protocol):
    def create(self, full_name: str, national_id: str, phone: str, email: str, address: str,
               role: str, otp: str, otp_expiry: datetime) -> CredentialRecord:
        ...

    def get_by_id(self, user_id: str) -> Optional[CredentialRecord]:
        ...

    def complete_verification(self, user_id: str, otp: str, password_hash: str, now: datetime) -> Optional[CredentialRecord]:
        """Set the password, mark verified and clear the OTP only if the record is unverified and ``otp`` is still the live challenge."""
        ...

    def set_otp(self, user_id: str, otp: str, otp_expiry: datetime) -> None:
        ...

    def consume_otp(self, user_id: str, otp: str, now: datetime) -> bool:
        """Clear the OTP only if the record is verified and ``otp`` is still the live challenge; False when nothing matched."""
        ...

    def clear_otp(self, user_id: str) -> None:
        ...

    def update_profile_fields(self, user_id: str, full_name: Optional[str], email: Optional[str],
                              address: Optional[str], profile_image_url: Optional[str]) -> Optional[CredentialRecord]:
        ...
