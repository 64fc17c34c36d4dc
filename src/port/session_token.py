from typing import Protocol
from ..domain.entity.account_entity import AccountEntity
from ..domain.entity.session_claims import SessionClaims

class SessionTokenService(Protocol):
    """
    セッショントークンの発行・検証インターフェース。
    """

    def issue(self, account: AccountEntity) -> str:
        ...

    def verify(self, token: str) -> SessionClaims:
        ...
