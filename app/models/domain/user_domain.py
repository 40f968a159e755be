from dataclasses import dataclass
from datetime import datetime
from typing import Literal

UserRole = Literal["user", "provider", "admin"]


@dataclass(slots=True, frozen=True)
class Caller:
    """Authenticated identity acting on a resource."""

    user_id: str
    role: UserRole = "user"
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(slots=True)
class UserProfile:
    """Row of the profiles table."""

    user_id: str
    email: str | None
    full_name: str | None
    phone: str | None
    role: UserRole
    created_at: datetime | None = None

    def to_caller(self) -> Caller:
        return Caller(user_id=self.user_id, role=self.role, email=self.email)
