"""
用户仓储实现 - 使用SQLAlchemy实现数据访问
"""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from domain.user.entity import User
from domain.user.repository import UserRepository
from infrastructure.models.user import UserModel
from core.logging_config import get_logger
from domain.common.exceptions import UserAlreadyExistsException


logger = get_logger(__name__)


class SQLAlchemyUserRepository(UserRepository):
    """用户仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: UserModel) -> User:
        """将数据库模型转换为领域实体"""
        return User(
            id=model.id,
            email=model.email,
            hashed_password=model.hashed_password,
            role=model.role,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: User) -> UserModel:
        """将领域实体转换为数据库模型"""
        return UserModel(
            id=entity.id,
            email=entity.email,
            hashed_password=entity.hashed_password,
            role=entity.role.value,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def create(self, user: User) -> User:
        """创建用户"""
        db_user = self._to_model(user)
        self.session.add(db_user)
        try:
            await self.session.flush()  # 获取生成的ID
        except IntegrityError:
            # 并发注册同一邮箱时由唯一约束兜底
            logger.warning("create_user_conflict", field="email", email=user.email)
            raise UserAlreadyExistsException(user.email)
        return self._to_entity(db_user)

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """根据ID获取用户"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        db_user = result.scalar_one_or_none()
        return self._to_entity(db_user) if db_user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """根据邮箱获取用户"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        db_user = result.scalar_one_or_none()
        return self._to_entity(db_user) if db_user else None

    async def exists_by_email(self, email: str) -> bool:
        """检查邮箱是否存在"""
        result = await self.session.execute(
            select(func.count()).select_from(UserModel)
            .where(UserModel.email == email)
        )
        return result.scalar() > 0

    async def count_all(self) -> int:
        """统计用户数量"""
        result = await self.session.execute(
            select(func.count()).select_from(UserModel)
        )
        return result.scalar()
