import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone

# 口座番号の上限（この値未満の乱数を採番する）
ACCOUNT_NUMBER_UPPER_BOUND = 10**15


@dataclass
class AccountEntity:
    """
    口座のビジネスドメインモデル

    id はストアが採番するサロゲートキー、number はセッショントークンに
    埋め込まれる業務上の口座番号。password_hash は外部に出してはならない。
    """
    id: int | None
    first_name: str
    last_name: str
    number: int
    password_hash: str = field(repr=False)
    balance: int = 0
    created_at: datetime | None = None


def generate_account_number() -> int:
    return secrets.randbelow(ACCOUNT_NUMBER_UPPER_BOUND)


def new_account(first_name: str, last_name: str, password_hash: str) -> AccountEntity:
    """新規口座を組み立てる（永続化前なので id は None）"""
    return AccountEntity(
        id=None,
        first_name=first_name,
        last_name=last_name,
        number=generate_account_number(),
        password_hash=password_hash,
        balance=0,
        created_at=datetime.now(timezone.utc),
    )
