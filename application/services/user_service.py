"""
用户应用服务（application/services）- 编排领域服务和处理应用逻辑
"""
from typing import Callable, List, Optional

from domain.user.entity import User, UserRole
from domain.user.events import UserCreated, UserLoggedIn
from domain.user.service import UserDomainService
from domain.common.unit_of_work import AbstractUnitOfWork
from application.dto import SignupDTO, LoginDTO, UserResponseDTO, AuthResultDTO
from application.ports.email import EmailSender
from application.services.token_service import TokenService
from core.config import settings
from core.logging_config import get_logger
from infrastructure.external.email import build_welcome_email


logger = get_logger(__name__)


class UserApplicationService:
    """用户应用服务 - 处理应用层逻辑"""

    def __init__(
        self,
        uow_factory: Callable[..., AbstractUnitOfWork],
        *,
        email_sender: Optional[EmailSender] = None,
        token_service: Optional[TokenService] = None,
    ):
        self._uow_factory = uow_factory
        self._email_sender = email_sender
        self._token_service = token_service or TokenService()

    async def signup(self, data: SignupDTO) -> AuthResultDTO:
        """注册新用户并签发令牌；欢迎邮件在事务提交后发送"""
        async with self._uow_factory() as uow:
            domain_service = UserDomainService(uow.user_repository)
            user = await domain_service.register_user(
                email=data.email,
                password=data.password,
                role=UserRole(data.role),
            )
            events = domain_service.get_domain_events()

        await self._dispatch(events)
        return self._auth_result(user)

    async def login(self, data: LoginDTO) -> AuthResultDTO:
        async with self._uow_factory(readonly=True) as uow:
            domain_service = UserDomainService(uow.user_repository)
            user = await domain_service.authenticate_user(
                email=data.email,
                password=data.password,
            )
            events = domain_service.get_domain_events()

        await self._dispatch(events)
        return self._auth_result(user)

    async def get_user_or_none(self, user_id: int) -> Optional[User]:
        """获取用户（领域实体，供权限判断使用）"""
        async with self._uow_factory(readonly=True) as uow:
            return await uow.user_repository.get_by_id(user_id)

    def verify_token(self, token: str) -> Optional[int]:
        """验证JWT令牌并返回用户ID（委托 TokenService）。

        - 过期: 抛出 TokenExpiredException（供上层统一处理）。
        - 无效: 返回 None（保持上层 401 无效凭据行为）。
        """
        return self._token_service.verify_access_token(token)

    def _auth_result(self, user: User) -> AuthResultDTO:
        return AuthResultDTO(
            user=UserResponseDTO.model_validate(user),
            token=self._token_service.create_access_token(user),
            expires_in=self._token_service.expires_in,
        )

    async def _dispatch(self, events: List) -> None:
        for event in events:
            if isinstance(event, UserCreated):
                logger.info("user_registered", user_id=event.user_id, role=event.role)
                await self._send_welcome_email(event.email)
            elif isinstance(event, UserLoggedIn):
                logger.info("user_logged_in", user_id=event.user_id)

    async def _send_welcome_email(self, email: str) -> None:
        if self._email_sender is None or not settings.email.enabled:
            return
        try:
            await self._email_sender.send(build_welcome_email(email))
        except Exception as exc:
            # 邮件失败不影响注册结果
            logger.warning("welcome_email_failed", email=email, error=str(exc))
