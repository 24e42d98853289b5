"""
认证API路由 - 注册、登录、当前用户
"""
from fastapi import APIRouter, Depends, status

from application.services.user_service import UserApplicationService
from application.dto import SignupDTO, LoginDTO, AuthResultDTO, UserResponseDTO
from core.response import success_response, Response as ApiResponse
from domain.user.entity import User
from api.dependencies import get_current_user, get_user_service

router = APIRouter(
    prefix="/auth",
    tags=["认证"]
)


@router.post(
    "/signup",
    summary="用户注册",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[AuthResultDTO],
)
async def signup(
    data: SignupDTO,
    service: UserApplicationService = Depends(get_user_service)
):
    """
    注册新用户并返回访问令牌

    - **email**: 邮箱地址（唯一）
    - **password**: 密码（至少6位）
    - **role**: ATTENDEE 或 ORGANIZER；首个注册用户自动成为 ADMIN
    """
    result = await service.signup(data)
    return success_response(data=result, message="User created successfully")


@router.post("/login", summary="用户登录", response_model=ApiResponse[AuthResultDTO])
async def login(
    data: LoginDTO,
    service: UserApplicationService = Depends(get_user_service)
):
    result = await service.login(data)
    return success_response(data=result, message="Login successful")


@router.get("/me", summary="当前用户", response_model=ApiResponse[UserResponseDTO])
async def me(current_user: User = Depends(get_current_user)):
    return success_response(data=UserResponseDTO.model_validate(current_user))
