from typing import Protocol

class PasswordHasher(Protocol):
    """
    パスワードの一方向ハッシュ化インターフェース。
    """

    def hash(self, plain_password: str) -> str:
        ...

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        ...
