import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from src.infra.config import Settings
from src.infra.di import DIContainer
from src.infra.logging_config import LoggingMiddleware, get_logger
from src.infra.peewee_client.db_init import initialize_database, close_database
from src.domain.exception.account_exceptions import AccountException
from src.domain.exception.auth_exceptions import AuthException

from .routers.accounts import create_router as create_accounts_router
from .routers.auth import create_router as create_auth_router
from .routers.transfer import router as transfer_router
from .error_handlers import (
    handle_auth_exception,
    handle_account_exception,
    handle_validation_exception,
    handle_generic_error,
)
from .rate_limiter import create_limiter, rate_limit_error_handler
from .security_middleware import SecurityHeadersMiddleware

API_VERSION = "0.1.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    アプリケーションを組み立てる

    設定は起動時に一度だけ読み込み、DIコンテナ経由で各サービスに注入する。
    """
    settings = settings or Settings()

    # 本番環境では適切なログレベルを設定する
    log_level = logging.INFO if settings.environment == "production" else logging.DEBUG
    logger = get_logger("app", level=log_level)
    # usecase 層の logging.getLogger(__name__) も JSON 形式で出力する
    get_logger("src", level=log_level)

    app = FastAPI(
        title="Account Service API",
        version=API_VERSION
    )
    app.state.settings = settings
    app.state.container = DIContainer(settings)

    # レート制限の設定
    limiter = create_limiter(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_error_handler)

    app.add_middleware(SecurityHeadersMiddleware)

    # Add logging middleware
    app.add_middleware(LoggingMiddleware)

    # CORS 設定（環境設定に基づく）
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Authorization"],
    )

    # 各機能モジュールのルーター登録
    app.include_router(create_auth_router(limiter))
    app.include_router(create_accounts_router(limiter))
    app.include_router(transfer_router)

    @app.on_event("startup")
    def startup_event():
        """アプリケーション起動時の初期化処理"""
        logger.info("Application starting up", extra={"environment": settings.environment})
        initialize_database(settings.database_url)

    @app.on_event("shutdown")
    def shutdown_event():
        """アプリケーション終了時のクリーンアップ"""
        close_database()
        logger.info("Application shutdown complete")

    @app.get("/health")
    async def health_check():
        """ヘルスチェックエンドポイント"""
        return {"status": "healthy", "version": API_VERSION}

    # エラーハンドラーの登録
    app.add_exception_handler(AuthException, handle_auth_exception)
    app.add_exception_handler(AccountException, handle_account_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(Exception, handle_generic_error)

    return app


app = create_app()

#uvicorn src.infra.rest_api.main:app --reload
