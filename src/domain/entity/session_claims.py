from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SessionClaims:
    """
    署名検証済みトークンのクレーム

    署名検証に成功したペイロードからのみ生成される。
    """
    account_number: int
    issued_at: int
    expires_at: int

    def is_expired(self, now: datetime) -> bool:
        # 有効期限ちょうどの時刻も期限切れとして扱う
        return now.timestamp() >= self.expires_at
