"""Peewee口座リポジトリのテスト"""
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from peewee import OperationalError

from src.domain.entity.account_entity import AccountEntity, new_account
from src.domain.exception.account_exceptions import (
    AccountNotFoundError,
    AccountValidationError,
    StoreFailure,
)
from src.infra.peewee_client.account_repository import PeeweeAccountRepository
from src.infra.peewee_client.db_init import close_database, initialize_database
from src.infra.peewee_client.peewee_models import AccountModel


@pytest.fixture
def repository(database_url):
    initialize_database(database_url)
    yield PeeweeAccountRepository()
    close_database()


def make_account(number=100, first_name="Ada", last_name="Lovelace"):
    return AccountEntity(
        id=None,
        first_name=first_name,
        last_name=last_name,
        number=number,
        password_hash="$2b$04$hash",
        created_at=datetime(2026, 1, 1, 9, 30, tzinfo=timezone.utc),
    )


class TestPeeweeAccountRepository:

    def test_save_assigns_id(self, repository):
        saved = repository.save(make_account())

        assert saved.id is not None
        assert saved.number == 100

    def test_get_returns_saved_account(self, repository):
        saved = repository.save(make_account(number=123456789012345))

        loaded = repository.get(saved.id)

        assert loaded.first_name == "Ada"
        assert loaded.last_name == "Lovelace"
        assert loaded.number == 123456789012345
        assert loaded.password_hash == "$2b$04$hash"
        assert loaded.balance == 0

    def test_created_at_is_returned_in_utc(self, repository):
        saved = repository.save(make_account())

        loaded = repository.get(saved.id)

        assert loaded.created_at == datetime(2026, 1, 1, 9, 30, tzinfo=timezone.utc)
        assert loaded.created_at.tzinfo is not None

    def test_created_at_defaults_when_missing(self, repository):
        account = make_account()
        account.created_at = None

        saved = repository.save(account)

        assert saved.created_at is not None

    def test_new_account_is_persisted(self, repository):
        saved = repository.save(new_account("Grace", "Hopper", "hash"))

        loaded = repository.get(saved.id)
        assert loaded.number == saved.number
        assert 0 <= loaded.number < 10**15

    def test_get_missing_raises_not_found(self, repository):
        with pytest.raises(AccountNotFoundError):
            repository.get(999)

    def test_id_beyond_integer_range_is_not_found(self, repository):
        """SQLite の INTEGER 範囲外の ID は存在しない口座として扱う"""
        with pytest.raises(AccountNotFoundError):
            repository.get(2**64)
        with pytest.raises(AccountNotFoundError):
            repository.delete(2**64)

    def test_number_beyond_integer_range_is_not_found(self, repository):
        with pytest.raises(AccountNotFoundError):
            repository.get_by_number(2**64)

    def test_update_with_out_of_range_value_is_rejected(self, repository):
        saved = repository.save(make_account())
        saved.balance = 2**64

        with pytest.raises(AccountValidationError):
            repository.update(saved)

    def test_get_by_number(self, repository):
        saved = repository.save(make_account(number=4242))

        loaded = repository.get_by_number(4242)

        assert loaded.id == saved.id

    def test_get_by_number_returns_oldest_on_collision(self, repository):
        first = repository.save(make_account(number=7, first_name="First"))
        repository.save(make_account(number=7, first_name="Second"))

        assert repository.get_by_number(7).id == first.id

    def test_get_by_number_missing_raises_not_found(self, repository):
        with pytest.raises(AccountNotFoundError) as exc_info:
            repository.get_by_number(31337)

        assert exc_info.value.lookup == "number"

    def test_list_returns_all_accounts_in_id_order(self, repository):
        a = repository.save(make_account(number=1))
        b = repository.save(make_account(number=2))

        accounts = repository.list()

        assert [account.id for account in accounts] == [a.id, b.id]

    def test_list_empty(self, repository):
        assert repository.list() == []

    def test_delete_removes_account(self, repository):
        saved = repository.save(make_account())

        repository.delete(saved.id)

        with pytest.raises(AccountNotFoundError):
            repository.get(saved.id)

    def test_delete_missing_raises_not_found(self, repository):
        with pytest.raises(AccountNotFoundError):
            repository.delete(999)

    def test_update_changes_fields_but_not_password(self, repository):
        saved = repository.save(make_account())
        saved.first_name = "Augusta"
        saved.balance = 500
        saved.password_hash = "should-not-be-written"

        repository.update(saved)

        loaded = repository.get(saved.id)
        assert loaded.first_name == "Augusta"
        assert loaded.balance == 500
        assert loaded.password_hash == "$2b$04$hash"

    def test_update_unsaved_account_is_rejected(self, repository):
        with pytest.raises(AccountValidationError):
            repository.update(make_account())

    def test_update_missing_raises_not_found(self, repository):
        account = make_account()
        account.id = 999

        with pytest.raises(AccountNotFoundError):
            repository.update(account)

    def test_store_errors_are_wrapped(self, repository):
        with patch.object(AccountModel, "get_by_id", side_effect=OperationalError("disk I/O error")):
            with pytest.raises(StoreFailure) as exc_info:
                repository.get(1)

        assert exc_info.value.operation == "get"

    def test_save_store_error_is_wrapped(self, repository):
        with patch.object(AccountModel, "create", side_effect=OperationalError("database is locked")):
            with pytest.raises(StoreFailure):
                repository.save(make_account())


class TestDatabaseInitialization:

    def test_initialize_creates_sqlite_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "bank.db"

        initialize_database(f"sqlite:///{db_path}")
        try:
            assert db_path.parent.exists()
            assert AccountModel.table_exists()
        finally:
            close_database()

    def test_initialize_is_idempotent(self, database_url):
        initialize_database(database_url)
        PeeweeAccountRepository().save(make_account())
        close_database()

        initialize_database(database_url)
        try:
            assert len(PeeweeAccountRepository().list()) == 1
        finally:
            close_database()
