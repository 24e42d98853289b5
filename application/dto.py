"""
数据传输对象（DTO）- 应用层与表现层之间的数据传输
"""
from pydantic import BaseModel, EmailStr, Field, field_validator, model_serializer, ConfigDict
from typing import Optional, List, Literal
from datetime import datetime, timezone

from domain.user.entity import UserRole
from domain.rsvp.entity import RSVPStatus


class DTOBase(BaseModel):
    """Base DTO: unify datetime serialization to UTC-Z for all subclasses."""

    @field_validator("*", mode="after")
    @classmethod
    def _assume_utc(cls, value):
        # SQLite 读回的时间不带时区，统一按 UTC 处理
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_serializer(mode="wrap")
    def _serialize_model(self, handler):  # type: ignore[override]
        data = handler(self)

        def convert(value):
            if isinstance(value, datetime):
                ts = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
                s = ts.astimezone(timezone.utc).isoformat()
                return s.replace("+00:00", "Z")
            if isinstance(value, list):
                return [convert(v) for v in value]
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            return value

        return convert(data)


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be empty")
    return value


# ---------------------------------------------------------------- 用户/认证

class SignupDTO(DTOBase):
    """注册DTO；ADMIN 不能自选，只授予首个注册用户"""
    email: EmailStr = Field(..., description="邮箱地址")
    password: str = Field(..., min_length=6, description="密码，至少6位")
    role: Literal["ATTENDEE", "ORGANIZER"] = Field("ATTENDEE", description="角色")


class LoginDTO(DTOBase):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponseDTO(DTOBase):
    """用户响应DTO（不含密码哈希）"""
    id: int
    email: str
    role: UserRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResultDTO(DTOBase):
    """登录/注册结果"""
    user: UserResponseDTO
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="过期时间（秒）")


class UserSummaryDTO(DTOBase):
    id: int
    email: str

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- 活动

class EventCreateDTO(DTOBase):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    date: datetime = Field(..., description="ISO 8601 日期时间")
    location: str = Field(..., min_length=1, max_length=255)

    check_not_blank = field_validator("title", "description", "location")(_not_blank)


class EventUpdateDTO(DTOBase):
    """部分更新：未提供的字段保持不变"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)

    check_not_blank = field_validator("title", "description", "location")(_not_blank)


class EventRSVPDTO(DTOBase):
    """嵌入在活动视图中的 RSVP"""
    id: int
    user_id: int
    status: RSVPStatus
    user: Optional[UserSummaryDTO] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class EventResponseDTO(DTOBase):
    id: int
    title: str
    description: str
    date: datetime
    location: str
    approved: bool
    organizer_id: int
    organizer: Optional[UserSummaryDTO] = None
    rsvps: List[EventRSVPDTO] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- RSVP

class RSVPRequestDTO(DTOBase):
    status: RSVPStatus


class RSVPEventDTO(DTOBase):
    """RSVP 响应中嵌入的活动（不含 rsvps 列表）"""
    id: int
    title: str
    description: str
    date: datetime
    location: str
    approved: bool
    organizer_id: int
    organizer: Optional[UserSummaryDTO] = None

    model_config = ConfigDict(from_attributes=True)


class RSVPResponseDTO(DTOBase):
    id: int
    user_id: int
    event_id: int
    status: RSVPStatus
    user: Optional[UserSummaryDTO] = None
    event: Optional[RSVPEventDTO] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
