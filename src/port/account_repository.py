from typing import Protocol, List
from ..domain.entity.account_entity import AccountEntity

class AccountRepository(Protocol):
    """
    口座データの永続化インターフェース。

    見つからない場合は AccountNotFoundError、永続化層の障害は StoreFailure を送出する。
    """

    def get(self, account_id: int) -> AccountEntity:
        ...

    def get_by_number(self, number: int) -> AccountEntity:
        ...

    def save(self, account: AccountEntity) -> AccountEntity:
        ...

    def delete(self, account_id: int) -> None:
        ...

    def list(self) -> List[AccountEntity]:
        ...

    def update(self, account: AccountEntity) -> None:
        ...
