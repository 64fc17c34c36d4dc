from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from typing import Dict, Any
from src.infra.logging_config import get_logger
from ...domain.exception.account_exceptions import (
    AccountException,
    AccountNotFoundError,
    AccountValidationError,
    StoreFailure,
)
from ...domain.exception.auth_exceptions import (
    AuthException,
    AuthenticationError,
    AuthorizationError,
)

logger = get_logger("api.errors")

# 認証失敗・別口座アクセスの双方で返す共通のチャレンジ
BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def create_error_response(
    error_type: str,
    user_message: str,
    detail: Any = None,
    status_code: int = 500,
    retry_available: bool = False,
    additional_data: Dict[str, Any] = None,
    headers: Dict[str, str] = None,
) -> JSONResponse:
    """統一されたエラーレスポンスを作成"""
    content = {
        "error_type": error_type,
        "user_message": user_message,
        "retry_available": retry_available
    }

    if detail:
        content["detail"] = detail

    if additional_data:
        content.update(additional_data)

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(content),
        headers=headers,
    )


def permission_denied_response() -> JSONResponse:
    """認証失敗と認可失敗で共通のレスポンス（区別できないようにする）"""
    return create_error_response(
        error_type="permission_denied",
        user_message="Permission denied",
        status_code=status.HTTP_401_UNAUTHORIZED,
        retry_available=False,
        headers=BEARER_CHALLENGE,
    )


async def handle_auth_exception(request: Request, exc: AuthException):
    """認証・認可例外のハンドリング"""
    if isinstance(exc, (AuthenticationError, AuthorizationError)):
        logger.warning(
            "Permission denied",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_code": exc.error_code,
            }
        )
        return permission_denied_response()

    # HashingFailure / SigningFailure / 未処理の VerificationError
    logger.error(
        f"Auth exception: {exc.__class__.__name__}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_code": exc.error_code,
        }
    )
    return create_error_response(
        error_type="internal_error",
        user_message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        retry_available=False
    )


async def handle_account_exception(request: Request, exc: AccountException):
    """口座例外のハンドリング"""
    if isinstance(exc, AccountNotFoundError):
        logger.warning(
            "Account not found",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_code": exc.error_code,
            }
        )
        return create_error_response(
            error_type="not_found",
            user_message="Account not found",
            status_code=status.HTTP_404_NOT_FOUND,
            retry_available=False
        )

    if isinstance(exc, AccountValidationError):
        logger.warning(
            "Validation error",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc)
            }
        )
        return create_error_response(
            error_type="validation_error",
            user_message=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
            retry_available=False
        )

    if isinstance(exc, StoreFailure):
        logger.error(
            "Store failure",
            extra={
                "path": request.url.path,
                "method": request.method,
                "operation": exc.operation,
                "error": str(exc)
            }
        )
    else:
        logger.error(
            f"Account exception: {exc.__class__.__name__}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_code": exc.error_code,
            }
        )

    return create_error_response(
        error_type="internal_error",
        user_message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        retry_available=False
    )


async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """FastAPIバリデーションエラーのハンドリング"""
    # 入力値（パスワードを含みうる）はログにもレスポンスにも含めない
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    logger.warning(
        "FastAPI validation error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": errors
        }
    )

    return create_error_response(
        error_type="validation_error",
        user_message="Invalid request body",
        detail=errors,
        status_code=422,
        retry_available=False
    )


async def handle_generic_error(request: Request, exc: Exception):
    """その他のエラーのハンドリング"""
    logger.error(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__
        },
        exc_info=True
    )

    return create_error_response(
        error_type="internal_error",
        user_message="An unexpected error occurred",
        detail=str(exc) if request.app.debug else None,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        retry_available=False
    )
