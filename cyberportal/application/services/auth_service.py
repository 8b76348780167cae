import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from passlib.context import CryptContext

from ..ports.audit_logger import AuditLogger
from ..ports.otp_sender import OTPSender
from ..ports.user_repo import CredentialRecord, UserRepository
from ...config import settings
from ...exceptions import (
    ExpiredOtpError,
    InvalidCredentialsError,
    InvalidOtpError,
    NotFoundError,
    UnverifiedError,
    ValidationError,
)
from ...models import Role
from ...utils import issue_otp, normalize_indian_phone, utcnow

logger = logging.getLogger(__name__)


def default_pwd_context() -> CryptContext:
    return CryptContext(schemes=settings.password_schemes_list, deprecated="auto")


def _missing(**fields: Any) -> list:
    return [name for name, value in fields.items() if not isinstance(value, str) or not value.strip()]


@dataclass
class AuthService:
    """Registration and two-step (password + OTP) login over the credential store.

    Every record moves through: registered (OTP pending) -> verified ->
    login OTP pending -> verified, with a new OTP always replacing the old one.
    """

    user_repo: UserRepository
    otp_sender: OTPSender
    audit_logger: Optional[AuditLogger] = None
    expose_otp: bool = True
    clock: Callable[[], datetime] = utcnow
    pwd_context: CryptContext = field(default_factory=default_pwd_context)

    def register(self, full_name: Optional[str], national_id: Optional[str], phone: Optional[str],
                 email: Optional[str], address: Optional[str], role: Optional[str]) -> Dict[str, Any]:
        missing = _missing(full_name=full_name, national_id=national_id, phone=phone,
                           email=email, address=address, role=role)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        formatted_phone = normalize_indian_phone(phone)
        if not formatted_phone:
            raise ValidationError("Invalid phone number format.")

        role_value = role.strip().upper()
        if role_value not in (Role.USER.value, Role.ADMIN.value):
            raise ValidationError("Invalid role. Must be 'USER' or 'ADMIN'.")

        otp, otp_expiry = issue_otp(self.clock())
        record = self.user_repo.create(
            full_name=full_name.strip(),
            national_id=national_id.strip(),
            phone=formatted_phone,
            email=email.strip(),
            address=address.strip(),
            role=role_value,
            otp=otp,
            otp_expiry=otp_expiry,
        )
        logger.info(f"User registered: {record.id}")
        self._deliver(record, otp)
        self._audit("register", record)

        return {
            "id": record.id,
            "full_name": record.full_name,
            "email": record.email,
            "role": record.role,
            "phone": record.phone,
            "created_at": record.created_at,
            "otp": otp if self.expose_otp else None,
        }

    def verify_registration(self, user_id: Optional[str], otp: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if _missing(id=user_id, otp=otp, password=password):
            raise ValidationError("User ID, OTP, and password are required")

        record = self._get(user_id)
        if record.is_verified:
            # the password is set once; a verified record has no registration challenge
            self._audit("verify_registration", record, success=False, details={"reason": "already_verified"})
            raise InvalidOtpError()

        now = self.clock()
        self._check_otp(record, otp, now, "verify_registration")

        updated = self.user_repo.complete_verification(record.id, otp, self.pwd_context.hash(password), now)
        if updated is None:
            # the challenge changed between the read and the conditional update
            self._audit("verify_registration", record, success=False, details={"reason": "superseded"})
            raise InvalidOtpError()

        self._audit("verify_registration", updated)
        return {
            "id": updated.id,
            "full_name": updated.full_name,
            "email": updated.email,
            "role": updated.role,
            "is_verified": updated.is_verified,
        }

    def login(self, user_id: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if _missing(id=user_id, password=password):
            raise ValidationError("User ID and password required")

        record = self._get(user_id)
        if not record.is_verified:
            self._audit("login", record, success=False, details={"reason": "unverified"})
            raise UnverifiedError()

        if not self._password_matches(password, record.password_hash):
            self._audit("login", record, success=False, details={"reason": "bad_password"})
            raise InvalidCredentialsError()

        otp, otp_expiry = issue_otp(self.clock())
        self.user_repo.set_otp(record.id, otp, otp_expiry)
        self._deliver(record, otp)
        self._audit("login", record)
        return {"id": record.id, "otp": otp if self.expose_otp else None}

    def verify_login(self, user_id: Optional[str], otp: Optional[str]) -> Dict[str, Any]:
        if _missing(id=user_id, otp=otp):
            raise ValidationError("User ID and OTP are required")

        record = self._get(user_id)
        if not record.is_verified:
            self._audit("verify_login", record, success=False, details={"reason": "unverified"})
            raise UnverifiedError()

        now = self.clock()
        self._check_otp(record, otp, now, "verify_login")

        if not self.user_repo.consume_otp(record.id, otp, now):
            self._audit("verify_login", record, success=False, details={"reason": "superseded"})
            raise InvalidOtpError()

        self._audit("verify_login", record)
        return {
            "id": record.id,
            "full_name": record.full_name,
            "email": record.email,
            "role": record.role,
        }

    def logout(self, user_id: Optional[str]) -> None:
        if _missing(id=user_id):
            raise ValidationError("User ID is required")
        record = self._get(user_id)
        self.user_repo.clear_otp(record.id)
        self._audit("logout", record)

    def _get(self, user_id: str) -> CredentialRecord:
        record = self.user_repo.get_by_id(user_id)
        if not record:
            raise NotFoundError("User not found")
        return record

    def _check_otp(self, record: CredentialRecord, otp: str, now: datetime, action: str) -> None:
        if record.otp is None or record.otp != otp:
            self._audit(action, record, success=False, details={"reason": "invalid_otp"})
            raise InvalidOtpError()
        if record.otp_expiry is None or now > record.otp_expiry:
            self._audit(action, record, success=False, details={"reason": "expired_otp"})
            raise ExpiredOtpError()

    def _password_matches(self, password: str, password_hash: Optional[str]) -> bool:
        if not password_hash:
            return False
        try:
            return self.pwd_context.verify(password, password_hash)
        except ValueError:
            # stored value is not a hash this context understands
            logger.warning("Unrecognised password hash format")
            return False

    def _deliver(self, record: CredentialRecord, otp: str) -> None:
        try:
            self.otp_sender.send(record.phone, otp)
        except Exception as e:
            logger.error(f"OTP delivery failed for user {record.id}: {e}")

    def _audit(self, action: str, record: CredentialRecord, success: bool = True,
               details: Optional[Dict[str, Any]] = None) -> None:
        if self.audit_logger is None:
            return
        self.audit_logger.log(action, record.phone, user_id=record.id, success=success, details=details)
