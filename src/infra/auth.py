"""
認証モジュール

このモジュールは、パスワードハッシュ化とセッショントークン（JWT）の
発行・検証を提供します。

主な機能:
- bcryptによるパスワードのハッシュ化と検証（passlib）
- JWTセッショントークンの生成と検証（python-jose）

セキュリティ考慮事項:
- 定数時間比較はbcrypt実装に委ね、独自実装しない
- 署名検証に成功するまでクレームの値を一切信用しない
- 署名用シークレットはログに出力しない
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from jose import JWTError, jwt
from jose.exceptions import JOSEError, JWTClaimsError
from passlib.context import CryptContext
from pydantic import SecretStr

from src.domain.entity.account_entity import AccountEntity
from src.domain.entity.session_claims import SessionClaims
from src.domain.exception.auth_exceptions import (
    HashingFailure,
    SigningFailure,
    MalformedTokenError,
    InvalidSignatureError,
    TokenExpiredError,
)
from src.infra.logging_config import get_logger

# パスワードコンテキストの初期化
# bcryptスキームを使用し、非推奨バージョンを自動処理
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# トークン内で口座番号を保持するクレーム名
ACCOUNT_CLAIM = "account"

logger = get_logger("auth")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BcryptPasswordHasher:
    """
    bcryptによるパスワードハッシュ

    ソルトはハッシュ生成ごとにランダムに生成され、コスト係数はpasslibの既定値を使う。
    """

    def __init__(self, context: CryptContext = pwd_context):
        self.context = context

    def hash(self, plain_password: str) -> str:
        """
        パスワードをハッシュ化する

        Raises:
            HashingFailure: 乱数源やリソースの問題でハッシュ生成に失敗した場合
        """
        try:
            return self.context.hash(plain_password)
        except (OSError, ValueError) as e:
            raise HashingFailure(type(e).__name__) from e

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        パスワードをハッシュと照合して検証する

        保存形式が不正な場合もFalseを返す。
        """
        try:
            return self.context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            return False


class JWTSessionTokenService:
    """
    JWTによるセッショントークンの発行と検証

    署名用シークレットは起動時に一度だけ読み込まれた設定値を注入する。
    リクエスト処理中に環境変数を読むことはない。
    """

    def __init__(
        self,
        secret: SecretStr,
        algorithm: str = "HS256",
        expire_minutes: int = 15,
        clock: Optional[Clock] = None,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expire_minutes)
        self.clock = clock or utc_now

    def __repr__(self) -> str:
        return f"JWTSessionTokenService(algorithm={self.algorithm!r}, expires_delta={self.expires_delta!r})"

    def issue(self, account: AccountEntity) -> str:
        """
        口座番号を束縛したアクセストークンを生成する

        Returns:
            str: エンコードされたJWTトークン文字列

        Raises:
            SigningFailure: シークレットが使用できない、または署名に失敗した場合
        """
        secret = self._secret.get_secret_value()
        if not secret:
            raise SigningFailure("signing secret is not configured")

        issued_at = self.clock()
        expire = issued_at + self.expires_delta
        to_encode = {
            ACCOUNT_CLAIM: account.number,
            "iat": int(issued_at.timestamp()),
            "exp": int(expire.timestamp()),
        }

        try:
            encoded_jwt = jwt.encode(to_encode, secret, algorithm=self.algorithm)
        except (JOSEError, TypeError, ValueError) as e:
            raise SigningFailure(type(e).__name__) from e

        logger.info("Access token created", extra={
            "account_id": account.id,
            "expires_at": expire.isoformat()
        })

        return encoded_jwt

    def verify(self, token: str) -> SessionClaims:
        """
        JWTトークンを検証してクレームを返す

        形式チェック、署名検証、クレームの型チェック、有効期限チェックの順に行う。

        Raises:
            MalformedTokenError: トークンの形式が不正、または必須クレームが欠けている場合
            InvalidSignatureError: 署名またはアルゴリズムが一致しない場合
            TokenExpiredError: 現在時刻が有効期限以降の場合
        """
        try:
            jwt.get_unverified_header(token)
        except JWTError as e:
            raise MalformedTokenError(str(e)) from e

        try:
            # 有効期限は「期限ちょうど」も拒否するため自前で判定する
            payload = jwt.decode(
                token,
                self._secret.get_secret_value(),
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTClaimsError as e:
            # 署名検証後の標準クレーム検証（iat の型など）の失敗
            raise MalformedTokenError(str(e)) from e
        except JWTError as e:
            raise InvalidSignatureError(str(e)) from e

        claims = self._to_claims(payload)

        if claims.is_expired(self.clock()):
            raise TokenExpiredError(claims.expires_at)

        return claims

    @staticmethod
    def _to_claims(payload: dict) -> SessionClaims:
        account_number = payload.get(ACCOUNT_CLAIM)
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")

        for name, value in ((ACCOUNT_CLAIM, account_number), ("iat", issued_at), ("exp", expires_at)):
            # bool は int のサブクラスなので明示的に除外する
            if not isinstance(value, int) or isinstance(value, bool):
                raise MalformedTokenError(f"claim '{name}' is missing or not an integer")

        return SessionClaims(
            account_number=account_number,
            issued_at=issued_at,
            expires_at=expires_at,
        )
