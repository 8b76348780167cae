from typing import Optional, Protocol


class IdentityRepository(Protocol):
    def upsert(self, provider_user_id: str, full_name: str, phone: Optional[str], email: Optional[str]) -> None:
        ...
