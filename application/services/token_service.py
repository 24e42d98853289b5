"""
令牌服务 - 签发与校验访问令牌（HS256 JWT）
"""
from typing import Optional
from datetime import datetime, timedelta, timezone
import uuid

import jwt

from domain.user.entity import User
from core.config import settings
from core.exceptions import TokenExpiredException
from core.logging_config import get_logger


logger = get_logger(__name__)


class TokenService:
    """访问令牌服务；令牌无状态，不落库"""

    @property
    def expires_in(self) -> int:
        return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    def create_access_token(self, user: User) -> str:
        """创建访问令牌"""
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
        to_encode = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value,
            "exp": expire,
            "type": "access",
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    def verify_access_token(self, token: str) -> Optional[int]:
        """Verify an access JWT and return the user id.

        - Expired token: raise TokenExpiredException
        - Invalid token or wrong type: return None
        """
        try:
            payload = jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM],
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredException()
        except jwt.InvalidTokenError as exc:
            logger.info("invalid_access_token", error=str(exc))
            return None

        if payload.get("type") != "access":
            return None

        user_id = payload.get("sub")
        try:
            return int(user_id)
        except (TypeError, ValueError):
            return None
