from typing import Optional
from sqlmodel import Session, select

from ..errors import store_errors
from .....models import IdentityUser
from .....application.ports.identity_repo import IdentityRepository
from .....utils import utcnow


class SqlIdentityRepository(IdentityRepository):
    def __init__(self, session: Session):
        self.session = session

    def upsert(self, provider_user_id: str, full_name: str, phone: Optional[str], email: Optional[str]) -> None:
        with store_errors(self.session, "identity_upsert"):
            row = self.session.exec(
                select(IdentityUser).where(IdentityUser.provider_user_id == provider_user_id)
            ).first()
            if row is None:
                row = IdentityUser(provider_user_id=provider_user_id)
            row.full_name = full_name
            row.phone = phone
            row.email = email
            row.updated_at = utcnow()
            self.session.add(row)
            self.session.commit()
