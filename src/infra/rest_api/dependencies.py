"""
FastAPI依存性注入の定義

このモジュールは、FastAPIエンドポイントで使用される依存性注入関数を提供します。
アプリケーションに保持されたDIコンテナからサービスインスタンスを取得し、
FastAPIの依存性システムに統合するためのアダプターレイヤーとして機能します。

主要機能:
- DIコンテナからのサービス取得
- アクセスゲートによる認証・口座所有者チェック
- 各ユースケースの組み立て
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from ..di import DIContainer
from ...port.account_repository import AccountRepository
from ...port.password_hasher import PasswordHasher
from ...port.session_token import SessionTokenService
from ...domain.entity.session_claims import SessionClaims
from ...usecase.access_control.access_gate import AccessGate, AdmittedRequest
from ...usecase.account_management.create_account import CreateAccountUseCase
from ...usecase.account_management.login_account import LoginAccountUseCase
from ...usecase.account_management.transfer_funds import TransferFundsUseCase


def get_container(request: Request) -> DIContainer:
    """
    リクエストを処理しているアプリケーションのDIコンテナを取得
    """
    return request.app.state.container


def get_account_repository_dependency(
    container: Annotated[DIContainer, Depends(get_container)]
) -> AccountRepository:
    """
    口座リポジトリの依存性を取得

    Returns:
        AccountRepository: 口座データアクセスインスタンス
    """
    return container.account_repository


def get_password_hasher_dependency(
    container: Annotated[DIContainer, Depends(get_container)]
) -> PasswordHasher:
    return container.password_hasher


def get_token_service_dependency(
    container: Annotated[DIContainer, Depends(get_container)]
) -> SessionTokenService:
    return container.token_service


def get_access_gate_dependency(
    container: Annotated[DIContainer, Depends(get_container)]
) -> AccessGate:
    return container.access_gate


def require_account_owner(
    id: str,
    gate: Annotated[AccessGate, Depends(get_access_gate_dependency)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> AdmittedRequest:
    """
    パスの口座IDに対する所有者チェックを行う

    パスの値は文字列のまま受け取り、認証情報の検証後に解釈する。
    トークンの口座番号とパスが指す口座の口座番号が一致した場合のみ通過する。
    不一致・認証失敗はいずれも AuthenticationError / AuthorizationError として
    エラーハンドラーで同一のレスポンスに変換される。

    Returns:
        AdmittedRequest: 検証済みクレームと対象口座
    """
    return gate.admit(authorization, id)


def require_session(
    gate: Annotated[AccessGate, Depends(get_access_gate_dependency)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> SessionClaims:
    """
    有効なセッショントークンのみを要求する（口座の所有者チェックなし）
    """
    return gate.authenticate(authorization)


def get_create_account_usecase(
    repository: Annotated[AccountRepository, Depends(get_account_repository_dependency)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher_dependency)],
    token_service: Annotated[SessionTokenService, Depends(get_token_service_dependency)],
) -> CreateAccountUseCase:
    """
    口座作成ユースケースを取得
    """
    return CreateAccountUseCase(repository, hasher, token_service)


def get_login_account_usecase(
    repository: Annotated[AccountRepository, Depends(get_account_repository_dependency)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher_dependency)],
    token_service: Annotated[SessionTokenService, Depends(get_token_service_dependency)],
) -> LoginAccountUseCase:
    """
    ログインユースケースを取得
    """
    return LoginAccountUseCase(repository, hasher, token_service)


def get_transfer_funds_usecase() -> TransferFundsUseCase:
    return TransferFundsUseCase()
