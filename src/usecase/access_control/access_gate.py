"""
アクセスゲート

保護されたエンドポイントへのリクエストごとに、Authorizationヘッダーの
セッショントークンを検証し、トークンに紐づく口座番号とリクエストパスが
指す口座の口座番号が一致するかを判定します。

状態遷移:
    NoCredential -> CredentialInvalid -> CredentialValid
        -> OwnershipChecked -> {Admitted, Forbidden}

拒否理由（認証情報なし・検証失敗・口座なし・別口座）はログにのみ残し、
呼び出し側には同一の例外種別の範囲でしか伝えません。
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ...port.account_repository import AccountRepository
from ...port.session_token import SessionTokenService
from ...domain.entity.account_entity import AccountEntity
from ...domain.entity.session_claims import SessionClaims
from ...domain.exception.account_exceptions import AccountNotFoundError
from ...domain.exception.auth_exceptions import (
    AuthenticationError,
    AuthorizationError,
    VerificationError,
)

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class GateState(str, Enum):
    NO_CREDENTIAL = "no_credential"
    CREDENTIAL_INVALID = "credential_invalid"
    CREDENTIAL_VALID = "credential_valid"
    OWNERSHIP_CHECKED = "ownership_checked"
    ADMITTED = "admitted"
    FORBIDDEN = "forbidden"


class TargetKind(str, Enum):
    """パスパラメータが指す識別子の種類"""
    SURROGATE_ID = "id"
    ACCOUNT_NUMBER = "number"


@dataclass(frozen=True)
class AdmittedRequest:
    """ゲートを通過したリクエストの信頼済みコンテキスト"""
    claims: SessionClaims
    account: Optional[AccountEntity] = None


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Authorizationヘッダーからトークン部分を取り出す

    "Bearer <token>" 形式を想定するが、スキームなしのトークン単体も受け付ける。
    ヘッダーが無い・空の場合は None を返す。
    """
    if authorization is None:
        return None
    value = authorization.strip()
    if not value:
        return None

    scheme, _, rest = value.partition(" ")
    if rest and scheme.lower() == BEARER_SCHEME:
        value = rest.strip()
    return value or None


class AccessGate:
    """
    セッショントークンの検証と口座の所有者チェックを行う認可レイヤー
    """

    def __init__(self, token_service: SessionTokenService, account_repository: AccountRepository):
        self.token_service = token_service
        self.account_repository = account_repository

    def authenticate(self, authorization: Optional[str]) -> SessionClaims:
        """
        トークンを検証してクレームを返す（口座の所有者チェックは行わない）

        Raises:
            AuthenticationError: ヘッダーが無い・空、またはトークン検証に失敗した場合
        """
        token = extract_bearer_token(authorization)
        if token is None:
            logger.warning("Request without credential", extra={"gate_state": GateState.NO_CREDENTIAL.value})
            raise AuthenticationError("Missing credential")

        try:
            claims = self.token_service.verify(token)
        except VerificationError as e:
            # 種別（期限切れ・形式不正・署名不一致）はログにのみ残す
            logger.warning(
                "Credential rejected",
                extra={"gate_state": GateState.CREDENTIAL_INVALID.value, "error_code": e.error_code},
            )
            raise AuthenticationError("Invalid credential") from e

        return claims

    def admit(
        self,
        authorization: Optional[str],
        target: Union[int, str],
        kind: TargetKind = TargetKind.SURROGATE_ID,
    ) -> AdmittedRequest:
        """
        トークンを検証し、対象口座の所有者であることを確認する

        Args:
            authorization: Authorizationヘッダーの値
            target: パスで指定された口座の識別子（パスの文字列のままでもよい）
            kind: target がサロゲートキーか口座番号か

        Returns:
            AdmittedRequest: 検証済みクレームと対象口座

        Raises:
            AuthenticationError: 認証情報が無い・無効、または対象口座が見つからない場合
            AuthorizationError: トークンの口座番号と対象口座の口座番号が一致しない場合
        """
        claims = self.authenticate(authorization)

        # 識別子の解釈は認証情報の検証後に行う
        try:
            target = int(target)
        except (TypeError, ValueError) as e:
            logger.warning(
                "Target identifier is not an integer",
                extra={"gate_state": GateState.CREDENTIAL_VALID.value, "target_kind": kind.value},
            )
            raise AuthenticationError("Invalid credential") from e

        try:
            if kind is TargetKind.ACCOUNT_NUMBER:
                account = self.account_repository.get_by_number(target)
            else:
                account = self.account_repository.get(target)
        except AccountNotFoundError as e:
            # 口座の存在有無を認証エンドポイント経由で推測させない
            logger.warning(
                "Target account lookup failed during authorization",
                extra={"gate_state": GateState.CREDENTIAL_VALID.value, "target": target, "target_kind": kind.value},
            )
            raise AuthenticationError("Invalid credential") from e

        if account.number != claims.account_number:
            logger.warning(
                "Cross account access detected",
                extra={"gate_state": GateState.FORBIDDEN.value, "target": target, "target_kind": kind.value},
            )
            raise AuthorizationError("Permission denied")

        logger.debug(
            "Request admitted",
            extra={"gate_state": GateState.ADMITTED.value, "account_id": account.id},
        )
        return AdmittedRequest(claims=claims, account=account)
