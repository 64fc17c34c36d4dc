"""
認証・認可関連の例外クラス

パスワードハッシュ、トークン署名・検証、アクセスゲートの判定結果を表します。
検証失敗の種別（期限切れ・形式不正・署名不一致）は内部でのみ区別し、
呼び出し側へのレスポンスでは区別しません。
"""

from typing import Optional


class AuthException(Exception):
    """認証・認可関連の基底例外クラス"""
    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code


class HashingFailure(AuthException):
    """パスワードハッシュ生成の失敗（乱数源・リソース枯渇など）"""
    def __init__(self, reason: str):
        super().__init__(f"Password hashing failed: {reason}", "HASHING_FAILURE")


class SigningFailure(AuthException):
    """トークン署名の失敗（シークレット未設定・不正など）"""
    def __init__(self, reason: str):
        super().__init__(f"Token signing failed: {reason}", "SIGNING_FAILURE")


class VerificationError(AuthException):
    """トークン検証失敗の基底クラス"""
    pass


class MalformedTokenError(VerificationError):
    """トークンの形式が不正"""
    def __init__(self, reason: str):
        super().__init__(f"Malformed token: {reason}", "TOKEN_MALFORMED")


class InvalidSignatureError(VerificationError):
    """署名が一致しない"""
    def __init__(self, reason: str):
        super().__init__(f"Invalid token signature: {reason}", "TOKEN_INVALID_SIGNATURE")


class TokenExpiredError(VerificationError):
    """有効期限切れ"""
    def __init__(self, expired_at: int):
        super().__init__(f"Token expired at {expired_at}", "TOKEN_EXPIRED")
        self.expired_at = expired_at


class AuthenticationError(AuthException):
    """認証情報が無い・無効な場合の例外"""
    def __init__(self, reason: str):
        super().__init__(reason, "UNAUTHENTICATED")


class AuthorizationError(AuthException):
    """有効な認証情報だが対象口座が異なる場合の例外"""
    def __init__(self, reason: str):
        super().__init__(reason, "FORBIDDEN")
