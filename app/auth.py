import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .constants import ROLE_ADMIN
from .database import get_db
from .exceptions import AuthenticationError, AuthorizationError
from .models import User
from .security_utils import verify_access_token

logger = logging.getLogger(__name__)

# auto_error=False so optional-auth routes still run without a header
security = HTTPBearer(auto_error=False)


def _user_id_from_token(token: str) -> Optional[int]:
    payload = verify_access_token(token)
    if not payload:
        return None

    user_claim = payload.get("user") or {}
    user_id = user_claim.get("id")
    if user_id is None:
        logger.warning(f"⚠️ Token missing user id claim. Available claims: {list(payload.keys())}")
        return None

    try:
        return int(user_id)
    except (TypeError, ValueError):
        logger.warning(f"⚠️ Token carries a non-numeric user id: {user_id!r}")
        return None


async def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[int]:
    """Resolve the caller's user id, or None when unauthenticated or the token is invalid"""
    if not credentials:
        return None
    return _user_id_from_token(credentials.credentials)


async def get_current_user_id(
    user_id: Optional[int] = Depends(get_optional_user_id),
) -> int:
    """Require an authenticated caller"""
    if user_id is None:
        raise AuthenticationError("Authentication required")
    return user_id


async def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """Load the authenticated user"""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Token refers to unknown user {user_id}")
        raise AuthenticationError("Authentication required")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Require an authenticated ADMIN"""
    if user.role != ROLE_ADMIN:
        logger.warning(f"⚠️ User {user.id} attempted an admin-only operation")
        raise AuthorizationError("Admin access required")
    return user
