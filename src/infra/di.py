from typing import Optional
from .config import Settings
from .auth import BcryptPasswordHasher, JWTSessionTokenService
from .peewee_client.account_repository import PeeweeAccountRepository
from ..port.account_repository import AccountRepository
from ..port.password_hasher import PasswordHasher
from ..port.session_token import SessionTokenService
from ..usecase.access_control.access_gate import AccessGate


class DIContainer:
    """依存性注入コンテナ

    アプリケーションごとに1つ生成され、app.state.container に保持される。
    署名用シークレットは生成時の Settings からのみ読み込む。
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._password_hasher: Optional[PasswordHasher] = None
        self._token_service: Optional[SessionTokenService] = None
        self._account_repository: Optional[AccountRepository] = None
        self._access_gate: Optional[AccessGate] = None

    @property
    def password_hasher(self) -> PasswordHasher:
        """パスワードハッシャーのシングルトンインスタンスを取得"""
        if self._password_hasher is None:
            self._password_hasher = BcryptPasswordHasher()
        return self._password_hasher

    @property
    def token_service(self) -> SessionTokenService:
        """トークンサービスのシングルトンインスタンスを取得"""
        if self._token_service is None:
            self._token_service = JWTSessionTokenService(
                secret=self.settings.jwt_secret,
                algorithm=self.settings.algorithm,
                expire_minutes=self.settings.access_token_expire_minutes,
            )
        return self._token_service

    @property
    def account_repository(self) -> AccountRepository:
        """口座リポジトリのシングルトンインスタンスを取得"""
        if self._account_repository is None:
            self._account_repository = PeeweeAccountRepository()
        return self._account_repository

    @property
    def access_gate(self) -> AccessGate:
        """アクセスゲートのシングルトンインスタンスを取得"""
        if self._access_gate is None:
            self._access_gate = AccessGate(self.token_service, self.account_repository)
        return self._access_gate
