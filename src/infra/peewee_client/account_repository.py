from datetime import datetime, timezone
from typing import List

from peewee import DoesNotExist, PeeweeException

from ...port.account_repository import AccountRepository
from ...domain.entity.account_entity import AccountEntity
from ...domain.exception.account_exceptions import (
    AccountNotFoundError,
    AccountValidationError,
    StoreFailure,
)
from .peewee_models import AccountModel


def _to_entity(row: AccountModel) -> AccountEntity:
    created_at = row.created_at
    if isinstance(created_at, datetime) and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return AccountEntity(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        number=row.number,
        password_hash=row.password,
        balance=row.balance,
        created_at=created_at,
    )


def _to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class PeeweeAccountRepository(AccountRepository):
    """
    Peewee を用いた AccountRepository の実装

    データベース接続は db_init.initialize_database() で db_proxy に束縛される。
    """

    def get(self, account_id: int) -> AccountEntity:
        # SQLite の INTEGER に収まらない値は存在しない口座として扱う
        try:
            return _to_entity(AccountModel.get_by_id(account_id))
        except (DoesNotExist, OverflowError) as e:
            raise AccountNotFoundError(account_id) from e
        except PeeweeException as e:
            raise StoreFailure("get", str(e)) from e

    def get_by_number(self, number: int) -> AccountEntity:
        """口座番号で口座を取得"""
        try:
            # 口座番号は一意制約がないため最も古い口座を返す
            row = (AccountModel
                   .select()
                   .where(AccountModel.number == number)
                   .order_by(AccountModel.id)
                   .first())
        except OverflowError as e:
            raise AccountNotFoundError(number, lookup="number") from e
        except PeeweeException as e:
            raise StoreFailure("get_by_number", str(e)) from e
        if row is None:
            raise AccountNotFoundError(number, lookup="number")
        return _to_entity(row)

    def save(self, account: AccountEntity) -> AccountEntity:
        fields = {
            "first_name": account.first_name,
            "last_name": account.last_name,
            "number": account.number,
            "password": account.password_hash,
            "balance": account.balance,
        }
        if account.created_at is not None:
            fields["created_at"] = _to_naive_utc(account.created_at)
        try:
            row = AccountModel.create(**fields)
        except PeeweeException as e:
            raise StoreFailure("save", str(e)) from e
        return _to_entity(row)

    def delete(self, account_id: int) -> None:
        try:
            deleted = AccountModel.delete_by_id(account_id)
        except OverflowError as e:
            raise AccountNotFoundError(account_id) from e
        except PeeweeException as e:
            raise StoreFailure("delete", str(e)) from e
        if not deleted:
            raise AccountNotFoundError(account_id)

    def list(self) -> List[AccountEntity]:
        """全口座を取得"""
        try:
            rows = list(AccountModel.select().order_by(AccountModel.id))
        except PeeweeException as e:
            raise StoreFailure("list", str(e)) from e
        return [_to_entity(row) for row in rows]

    def update(self, account: AccountEntity) -> None:
        """パスワード以外の項目を更新する"""
        if account.id is None:
            raise AccountValidationError("Account must be saved before it can be updated")
        fields = {
            "first_name": account.first_name,
            "last_name": account.last_name,
            "number": account.number,
            "balance": account.balance,
        }
        if account.created_at is not None:
            fields["created_at"] = _to_naive_utc(account.created_at)
        try:
            updated = (AccountModel
                       .update(**fields)
                       .where(AccountModel.id == account.id)
                       .execute())
        except OverflowError as e:
            raise AccountValidationError("Value out of range for storage") from e
        except PeeweeException as e:
            raise StoreFailure("update", str(e)) from e
        if not updated:
            raise AccountNotFoundError(account.id)
