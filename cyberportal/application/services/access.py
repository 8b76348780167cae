from ..ports.user_repo import CredentialRecord, UserRepository
from ...exceptions import ForbiddenError, NotFoundError
from ...models import Role


def require_role(user_repo: UserRepository, user_id: str, role: Role) -> CredentialRecord:
    """Load ``user_id`` and insist it holds ``role``."""
    record = user_repo.get_by_id(user_id)
    if not record:
        raise NotFoundError("User not found")
    if record.role != role.value:
        raise ForbiddenError(f"Access denied. {role.value.title()} role required.")
    return record
