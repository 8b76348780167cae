from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from ..errors import store_errors
from .....models import User
from .....application.ports.user_repo import UserRepository, CredentialRecord
from .....utils import utcnow

DUPLICATE_USER_MESSAGE = "User with these details already exists."


class SqlUserRepository(UserRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, user: User) -> CredentialRecord:
        return CredentialRecord(
            id=user.id,
            full_name=user.full_name,
            national_id=user.national_id,
            phone=user.phone,
            email=user.email,
            address=user.address,
            role=user.role,
            password_hash=user.password_hash,
            otp=user.otp,
            otp_expiry=user.otp_expiry,
            is_verified=bool(user.is_verified),
            created_at=user.created_at,
            updated_at=user.updated_at,
            gov_employee_id=user.gov_employee_id,
            profile_image_url=user.profile_image_url,
        )

    def _get(self, user_id: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.id == user_id)).first()

    def _conditional_update(self, user_id: str, otp: str, now: datetime, action: str, verified: bool, **values) -> bool:
        table = User.__table__
        stmt = (
            update(table)
            .where(table.c.id == user_id)
            .where(table.c.otp == otp)
            .where(table.c.otp_expiry >= now)
            .where(table.c.is_verified.is_(verified))
            .values(otp=None, otp_expiry=None, updated_at=utcnow(), **values)
        )
        with store_errors(self.session, action):
            result = self.session.connection().execute(stmt)
            self.session.commit()
        return result.rowcount == 1

    def create(self, full_name: str, national_id: str, phone: str, email: str, address: str,
               role: str, otp: str, otp_expiry: datetime) -> CredentialRecord:
        user = User(
            full_name=full_name,
            national_id=national_id,
            phone=phone,
            email=email,
            address=address,
            role=role,
            otp=otp,
            otp_expiry=otp_expiry,
            is_verified=False,
        )
        with store_errors(self.session, "register", DUPLICATE_USER_MESSAGE):
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        return self._to_dto(user)

    def get_by_id(self, user_id: str) -> Optional[CredentialRecord]:
        with store_errors(self.session, "get_user"):
            user = self._get(user_id)
        return self._to_dto(user) if user else None

    def complete_verification(self, user_id: str, otp: str, password_hash: str, now: datetime) -> Optional[CredentialRecord]:
        matched = self._conditional_update(
            user_id, otp, now, "verify_registration", verified=False,
            password_hash=password_hash, is_verified=True,
        )
        if not matched:
            return None
        return self.get_by_id(user_id)

    def set_otp(self, user_id: str, otp: str, otp_expiry: datetime) -> None:
        with store_errors(self.session, "set_otp"):
            user = self._get(user_id)
            if not user:
                return
            user.otp = otp
            user.otp_expiry = otp_expiry
            user.updated_at = utcnow()
            self.session.add(user)
            self.session.commit()

    def consume_otp(self, user_id: str, otp: str, now: datetime) -> bool:
        return self._conditional_update(user_id, otp, now, "verify_login", verified=True)

    def clear_otp(self, user_id: str) -> None:
        with store_errors(self.session, "clear_otp"):
            user = self._get(user_id)
            if not user:
                return
            user.otp = None
            user.otp_expiry = None
            user.updated_at = utcnow()
            self.session.add(user)
            self.session.commit()

    def update_profile_fields(self, user_id: str, full_name: Optional[str], email: Optional[str],
                              address: Optional[str], profile_image_url: Optional[str]) -> Optional[CredentialRecord]:
        with store_errors(self.session, "update_profile", DUPLICATE_USER_MESSAGE):
            user = self._get(user_id)
            if not user:
                return None
            if full_name is not None:
                user.full_name = full_name
            if email is not None:
                user.email = email
            if address is not None:
                user.address = address
            if profile_image_url is not None:
                user.profile_image_url = profile_image_url
            user.updated_at = utcnow()
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        return self._to_dto(user)
