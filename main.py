"""
FastAPI应用主入口
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from api.routes import auth as auth_routes
from api.routes import events as events_routes
from api.routes import ws as ws_routes
from api.middleware import RequestIDMiddleware, LoggingMiddleware
from core.config import settings
from core.exceptions import register_exception_handlers
from core.response import success_response
from core.logging_config import get_logger, configure_logging
from infrastructure.database import create_tables
from application.services.realtime_service import RealtimeService
from infrastructure.realtime.connection_registry import ConnectionRegistry
from infrastructure.realtime.dispatcher import BroadcastDispatcher


# 初始化日志：在入口处显式配置，避免模块导入时的副作用
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    if settings.DEBUG or settings.DB_AUTO_CREATE:
        await create_tables()
        logger.info("database_initialized", message="Database tables created")
    else:
        logger.info("database_auto_create_skipped", message="Set DB_AUTO_CREATE=true to create tables at startup")

    # 实时通信：每个应用实例一个连接注册表与广播器
    registry = ConnectionRegistry()
    app.state.connection_registry = registry
    app.state.broadcaster = BroadcastDispatcher(registry)
    app.state.realtime_service = RealtimeService(registry=registry)
    logger.info("realtime_initialized")

    yield

    await app.state.realtime_service.shutdown()
    logger.info("application_shutdown", message="Application shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="活动管理 API：用户、活动、RSVP 与实时变更推送",
)

# 添加中间件（注意顺序：从下往上执行）
app.add_middleware(LoggingMiddleware)
# Request ID 最后添加、最先执行，为日志中间件提供 request_id
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册全局异常处理器
register_exception_handlers(app)


# 注册路由
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(events_routes.router, prefix="/api/v1")
app.include_router(ws_routes.router)


# 根路径
@app.get("/", tags=["Root"])
async def root():
    """API根路径"""
    return success_response(
        data={
            "status": "OK",
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs": "/docs",
            "websocket": "/ws",
        },
        message="Event Management API is running",
    )


# 健康检查
@app.get("/health", tags=["Health"])
async def health_check():
    """健康检查端点"""
    registry = getattr(app.state, "connection_registry", None)
    return success_response(
        data={
            "status": "healthy",
            "websocket_connections": registry.size() if registry is not None else 0,
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
