"""
口座関連の例外クラス

このモジュールは、口座管理に関する例外を定義します。
ストアの検索失敗、入力値の不正、永続化層の障害を統一的に扱います。
"""

from typing import Optional


class AccountException(Exception):
    """口座関連の基底例外クラス"""
    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class AccountNotFoundError(AccountException):
    """指定された口座が見つからない場合の例外"""
    def __init__(self, identifier: int, lookup: str = "id"):
        super().__init__(f"Could not get account: {lookup}={identifier}", "ACCOUNT_NOT_FOUND")
        self.identifier = identifier
        self.lookup = lookup


class AccountValidationError(AccountException):
    """入力値が不正な場合の例外"""
    def __init__(self, reason: str):
        super().__init__(reason, "VALIDATION_ERROR")


class StoreFailure(AccountException):
    """永続化層の障害。コアでは再試行しない"""
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Store failure during {operation}: {reason}", "STORE_FAILURE")
        self.operation = operation
