"""
Bearer token handling. Tokens are issued by the identity provider and
carry the user id in `sub`; `create_access_token` mints compatible tokens
for local use and tests.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import error_codes
from app.core.config import settings
from app.core.exceptions import AuthenticationError, NotFoundError
from app.crud.profile import SQLProfileStore
from app.db.database import get_db
from app.models.profile import Profile

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[Dict[str, Any]] = None
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    payload = {
        "sub": str(user_id),
        "exp": int(expire.timestamp()),
        "iat": int(now.timestamp()),
    }
    if settings.JWT_AUDIENCE:
        payload["aud"] = settings.JWT_AUDIENCE
    if additional_claims:
        payload.update(additional_claims)

    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options={"verify_aud": settings.JWT_AUDIENCE is not None},
        )
    except JWTError as e:
        logger.info(f"Rejected bearer token: {str(e)}")
        raise AuthenticationError("Invalid or expired token", error_codes.INVALID_TOKEN)

    if not payload.get("sub"):
        raise AuthenticationError("Token has no subject", error_codes.INVALID_TOKEN)
    return payload


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    if credentials is None:
        raise AuthenticationError()
    return str(verify_token(credentials.credentials)["sub"])


async def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[str]:
    """Anonymous callers get None; a bad token is still rejected."""
    if credentials is None:
        return None
    return str(verify_token(credentials.credentials)["sub"])


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> Profile:
    profile = await SQLProfileStore(db).get(user_id)
    if not profile:
        raise NotFoundError("Profile not found. Please create your profile first.", error_codes.PROFILE_NOT_FOUND)
    return profile
