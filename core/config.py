"""
配置文件 - 项目配置管理
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Union
from pydantic import model_validator


class DatabaseSettings(BaseModel):
    url: str = "sqlite+aiosqlite:///./data/events.db"
    echo: bool = False


class RealtimeSettings(BaseModel):
    # 每个 WebSocket 连接的发送队列上限；队满视为发送失败并断开
    send_queue_max: int = 100
    close_code_overflow: int = 1013


class EmailSettings(BaseModel):
    enabled: bool = True
    sender: str = '"Event Management" <noreply@eventapp.com>'
    welcome_subject: str = "Welcome to Event Management App!"


class Settings(BaseSettings):
    """项目配置"""

    # 基础配置
    PROJECT_NAME: str = Field(default="Event Management API")
    VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=True)
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # 分组配置：Database/Realtime/Email 采用嵌套模型（DATABASE__URL 等）
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    realtime: RealtimeSettings = Field(default_factory=RealtimeSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)

    # 启动时自动建表（DEBUG 下总是建表）
    DB_AUTO_CREATE: bool = Field(default=False)

    # 安全配置
    SECRET_KEY: Optional[str] = Field(
        default=None,
        description="JWT签名密钥，所有环境必须设置"
    )
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=24 * 60)

    # CORS配置
    CORS_ORIGINS: Union[list, str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
    )

    # 日志/请求体记录配置
    LOG_REQUEST_BODY_ENABLE_BY_DEFAULT: bool = Field(default=True)
    LOG_REQUEST_BODY_MAX_BYTES: int = Field(default=2048)

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )

    @model_validator(mode="after")
    def _validate_secret_key(self):
        if not self.SECRET_KEY:
            raise ValueError(
                "SECRET_KEY is not configured. Set SECRET_KEY in the environment or .env"
            )
        return self

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """允许 JSON 字符串或逗号分隔字符串两种格式。"""
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                import json
                try:
                    arr = json.loads(s)
                    if isinstance(arr, list):
                        return arr
                except ValueError:
                    pass
            if "," in s:
                return [item.strip() for item in s.split(",") if item.strip()]
            return [s]
        return v


settings = Settings()
