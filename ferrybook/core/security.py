"""
Security utilities for authentication and authorization

Tokens are issued by an external identity service; this module only signs
tokens for tooling and tests and verifies bearer tokens on requests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from uuid import UUID
import logging
import time

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from ferrybook.config import settings
from ferrybook.core.database import get_session
from ferrybook.core.exceptions import AuthenticationError, AuthorizationError
from ferrybook.models.user import User

logger = logging.getLogger(__name__)

# Missing credentials are reported through AuthenticationError, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


class SecurityManager:
    """
    Security manager for authentication and authorization
    """

    @staticmethod
    def create_access_token(
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create a JWT access token
        """
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
        )

        to_encode.update({
            "exp": expire,
            "type": "access",
            "iat": int(time.time()),
        })

        return jwt.encode(
            to_encode,
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode and verify a JWT token
        """
        try:
            return jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM]
            )
        except JWTError as e:
            logger.info(f"JWT decode error: {e}")
            raise AuthenticationError("Could not validate credentials")

    @staticmethod
    def verify_token_type(payload: Dict[str, Any], expected_type: str):
        """
        Verify token type (access or refresh)
        """
        if payload.get("type") != expected_type:
            raise AuthenticationError(f"Invalid token type. Expected {expected_type}")


# Create global security manager
security_manager = SecurityManager()


def create_user_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    return security_manager.create_access_token(
        {"sub": str(user.id), "role": user.role.value},
        expires_delta=expires_delta
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_session)
) -> User:
    """
    Resolve the bearer token to an active user
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Not authenticated")

    payload = security_manager.decode_token(credentials.credentials)
    security_manager.verify_token_type(payload, "access")

    subject = payload.get("sub")
    try:
        user_id = UUID(str(subject))
    except ValueError:
        raise AuthenticationError("Could not validate credentials")

    user = await db.get(User, user_id)
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is disabled")

    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Require admin role
    """
    if not current_user.is_admin:
        logger.warning(f"Non-admin user {current_user.id} attempted an admin operation")
        raise AuthorizationError("Admin access required")
    return current_user
