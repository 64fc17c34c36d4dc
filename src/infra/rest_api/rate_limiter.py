from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request, Response

from src.infra.config import Settings

# 公開エンドポイントの制限値
LOGIN_RATE_LIMIT = "5/minute"
CREATE_RATE_LIMIT = "10/minute"


def create_limiter(settings: Settings) -> Limiter:
    """
    アプリケーションごとのレート制限を作成する

    制限対象は未認証の公開エンドポイントのみなので、IPアドレスで識別する。
    カウンタはインスタンスごとのインメモリストレージに保持される。
    """
    return Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


# レート制限エラーハンドラー
def rate_limit_error_handler(request: Request, exc: RateLimitExceeded) -> Response:
    response = Response(
        content='{"error_type": "rate_limited", "user_message": "Too many requests. Please retry later.", "retry_available": true}',
        status_code=429,
        headers={
            "Retry-After": str(exc.retry_after) if hasattr(exc, "retry_after") else "60",
            "Content-Type": "application/json"
        }
    )
    return response
