"""
请求/响应日志中间件
记录每个 HTTP 请求的开始、结束与耗时；请求体按开关记录并脱敏
"""
import json
import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from core.logging_config import get_logger
from core.config import settings


logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """HTTP 访问日志；WebSocket 连接不经过这里，由 realtime 模块自行记录"""

    SKIP_PATHS = {"/", "/health", "/docs", "/redoc", "/openapi.json"}

    SENSITIVE_FIELDS = {"password", "token", "access_token", "secret"}

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.enable_body_log_default: bool = settings.LOG_REQUEST_BODY_ENABLE_BY_DEFAULT
        self.max_body_log_bytes: int = settings.LOG_REQUEST_BODY_MAX_BYTES

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        info = {"query_params": dict(request.query_params)}
        if request.method in ("POST", "PUT", "PATCH") and self._should_log_body(request):
            body = await self._sanitized_body(request)
            if body is not None:
                info["body"] = body

        logger.info("request_started", **info)
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                duration=time.perf_counter() - start,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
            raise

        duration = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{duration:.3f}"

        status_code = response.status_code
        if status_code < 400:
            logger.info("request_completed", status_code=status_code, duration=duration)
        elif status_code < 500:
            logger.warning("request_client_error", status_code=status_code, duration=duration)
        else:
            logger.error("request_server_error", status_code=status_code, duration=duration)
        return response

    def _should_log_body(self, request: Request) -> bool:
        # X-Log-Body: true/false 可按请求覆盖默认值
        header = (request.headers.get("X-Log-Body") or "").lower()
        if header in {"true", "1", "yes"}:
            return True
        if header in {"false", "0", "no"}:
            return False
        return bool(self.enable_body_log_default and settings.DEBUG)

    async def _sanitized_body(self, request: Request) -> Any:
        body = await request.body()
        if not body:
            return None
        text = body[: self.max_body_log_bytes].decode("utf-8", errors="ignore")
        if "application/json" not in request.headers.get("content-type", "").lower():
            return text
        try:
            return self._sanitize(json.loads(text))
        except ValueError:
            # 截断后的 JSON 无法解析，按文本记录
            return text

    def _sanitize(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: "***" if k.lower() in self.SENSITIVE_FIELDS else self._sanitize(v)
                for k, v in data.items()
            }
        if isinstance(data, list):
            return [self._sanitize(v) for v in data]
        return data
