"""
API依赖项 - 认证、授权与服务装配
"""
from typing import Optional

from fastapi import Depends, Request, WebSocket
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from application.services.user_service import UserApplicationService
from application.services.event_service import EventApplicationService
from application.services.realtime_service import RealtimeService
from core.exceptions import UnauthorizedException
from domain.user.entity import User
from infrastructure.external.email import LoggingEmailSender
from infrastructure.realtime.dispatcher import BroadcastDispatcher
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork


# HTTP Bearer for direct API calls
http_bearer = HTTPBearer(
    scheme_name="Bearer",
    description="JWT Bearer token authentication",
    auto_error=False,
)


async def get_token(
    bearer_token: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
) -> str:
    """从 Authorization: Bearer 头中提取 token"""
    if bearer_token and bearer_token.credentials:
        return bearer_token.credentials
    raise UnauthorizedException("No token provided")


def get_broadcaster(request: Request) -> BroadcastDispatcher:
    """应用级单例，由 lifespan 创建并挂在 app.state 上"""
    return request.app.state.broadcaster


def get_realtime_service(websocket: WebSocket) -> RealtimeService:
    return websocket.app.state.realtime_service


async def get_user_service() -> UserApplicationService:
    return UserApplicationService(
        uow_factory=SQLAlchemyUnitOfWork,
        email_sender=LoggingEmailSender(),
    )


async def get_event_service(
    broadcaster: BroadcastDispatcher = Depends(get_broadcaster),
) -> EventApplicationService:
    return EventApplicationService(uow_factory=SQLAlchemyUnitOfWork, broadcaster=broadcaster)


async def get_current_user(
    token: str = Depends(get_token),
    service: UserApplicationService = Depends(get_user_service),
) -> User:
    """获取当前登录用户；令牌有效但用户已不存在时同样视为未认证"""
    user_id = service.verify_token(token)
    if user_id is None:
        raise UnauthorizedException("Invalid token")
    user = await service.get_user_or_none(user_id)
    if user is None:
        raise UnauthorizedException("Invalid token")
    return user
