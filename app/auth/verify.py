"""
verify.py
---------
Purpose:
    JWT verification using Supabase JWKS (ES256) and caller resolution.

Notes:
    - Fetches JWKS from Supabase and caches keys.
    - `auth_dependency` returns the decoded claims.
    - `current_caller` resolves the claims to a Caller with the profile role.
"""

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.domain.user_domain import Caller
from app.services.user_service import get_user_profile

SUPABASE_AUDIENCE = "authenticated"

logger = get_logger(__name__)

_jwk_client = PyJWKClient(settings.jwks_url())
_security = HTTPBearer()


def verify_jwt(token: str) -> dict:
    try:
        signing_key = _jwk_client.get_signing_key_from_jwt(token)
        decoded = jwt.decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience=SUPABASE_AUDIENCE,
            options={"verify_exp": True},
        )
        return decoded
    except jwt.PyJWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid authentication token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def auth_dependency(credentials: HTTPAuthorizationCredentials = Depends(_security)) -> dict:
    token = credentials.credentials
    return verify_jwt(token)


async def _resolve_caller(claims: dict) -> Caller:
    user_id = claims.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    profile = await get_user_profile(user_id)
    if not profile:
        logger.warning("Token subject has no profile", user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="The user belonging to this token no longer exists",
        )

    return profile.to_caller()


async def current_caller(claims: dict = Depends(auth_dependency)) -> Caller:
    return await _resolve_caller(claims)


def require_admin(caller: Caller = Depends(current_caller)) -> Caller:
    if not caller.is_admin:
        logger.warning("Admin route denied", user_id=caller.user_id, role=caller.role)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to perform this action",
        )
    return caller
