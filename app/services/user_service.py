"""
User service for profile lookups.
The caller's role lives in the profiles table, not in the Supabase JWT.
"""

from app.db.helpers import fetch_one
from app.infrastructure.observability.logging import get_logger
from app.models.domain.user_domain import UserProfile

logger = get_logger(__name__)

_KNOWN_ROLES = {"user", "provider", "admin"}


async def get_user_profile(user_id: str) -> UserProfile | None:
    """
    Fetch a profile by user id.

    Args:
        user_id: UUID string of the user

    Returns:
        UserProfile domain model, None if not found
    """
    row = await fetch_one(
        """
        SELECT id, email, full_name, phone, role, created_at
        FROM profiles
        WHERE id = %s
        """,
        (user_id,),
    )

    if not row:
        logger.info("Profile not found", user_id=user_id)
        return None

    role = row.get("role") or "user"
    if role not in _KNOWN_ROLES:
        logger.warning("Unknown profile role, treating as user", user_id=user_id, role=role)
        role = "user"

    return UserProfile(
        user_id=str(row["id"]),
        email=row.get("email"),
        full_name=row.get("full_name"),
        phone=row.get("phone"),
        role=role,
        created_at=row.get("created_at"),
    )
