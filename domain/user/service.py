"""
用户领域服务 - 处理注册与认证的业务流程
"""
from typing import List
from datetime import datetime, timezone
import hashlib
import hmac
import secrets

from .entity import User, UserRole
from .repository import UserRepository
from .events import UserCreated, UserLoggedIn
from domain.common.exceptions import (
    DomainValidationException,
    InvalidCredentialsException,
    UserAlreadyExistsException,
)


MIN_PASSWORD_LENGTH = 6


class PasswordService:
    """密码服务 - 处理密码相关的业务逻辑"""

    ITERATIONS = 100000

    @staticmethod
    def hash_password(password: str) -> str:
        """密码哈希（PBKDF2-SHA256，随机盐）"""
        salt = secrets.token_hex(32)
        pwd_hash = hashlib.pbkdf2_hmac('sha256',
                                       password.encode('utf-8'),
                                       salt.encode('utf-8'),
                                       PasswordService.ITERATIONS)
        return f"{salt}${pwd_hash.hex()}"

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """验证密码"""
        try:
            salt, pwd_hash = hashed_password.split('$')
        except ValueError:
            return False
        new_hash = hashlib.pbkdf2_hmac('sha256',
                                       plain_password.encode('utf-8'),
                                       salt.encode('utf-8'),
                                       PasswordService.ITERATIONS)
        return hmac.compare_digest(new_hash.hex(), pwd_hash)

    @staticmethod
    def validate_password_strength(password: str) -> None:
        """业务规则：密码长度"""
        if len(password) < MIN_PASSWORD_LENGTH:
            raise DomainValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )


class UserDomainService:
    """用户领域服务 - 编排复杂的业务流程"""

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository
        self.password_service = PasswordService()
        self.events: List = []  # 领域事件收集

    async def register_user(self, email: str, password: str,
                            role: UserRole = UserRole.ATTENDEE) -> User:
        """用户注册的业务流程"""
        # 业务规则1：验证密码强度
        self.password_service.validate_password_strength(password)

        # 业务规则2：检查邮箱是否已存在
        if await self.user_repository.exists_by_email(email):
            raise UserAlreadyExistsException(email)

        now = datetime.now(timezone.utc)
        try:
            user = User(
                id=None,
                email=email,
                hashed_password=self.password_service.hash_password(password),
                role=role,
                created_at=now,
                updated_at=now,
            )
        except ValueError as exc:
            raise DomainValidationException(str(exc), field="email")

        # 业务规则3：首个用户设为管理员
        if await self.user_repository.count_all() == 0:
            user.promote_to_admin()

        created_user = await self.user_repository.create(user)

        self.events.append(UserCreated(user_id=created_user.id,
                                       email=created_user.email,
                                       role=created_user.role.value))
        return created_user

    async def authenticate_user(self, email: str, password: str) -> User:
        """用户认证的业务流程；未知邮箱与错误密码返回同一异常"""
        user = await self.user_repository.get_by_email(email)
        if not user:
            raise InvalidCredentialsException()

        if not self.password_service.verify_password(password, user.hashed_password):
            raise InvalidCredentialsException()

        self.events.append(UserLoggedIn(user_id=user.id))
        return user

    def get_domain_events(self) -> List:
        """获取并清空领域事件"""
        events = self.events.copy()
        self.events.clear()
        return events
