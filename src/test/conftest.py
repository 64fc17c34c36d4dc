import os
from typing import Dict, List

import pytest
from passlib.context import CryptContext
from pydantic import SecretStr

# main.py はインポート時にアプリケーションを組み立てるため、先に環境変数を設定する
TEST_SECRET = "test-secret-key-that-is-at-least-32-characters-long"
os.environ.setdefault("JWT_SECRET", TEST_SECRET)
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from src.domain.entity.account_entity import AccountEntity  # noqa: E402
from src.domain.exception.account_exceptions import AccountNotFoundError  # noqa: E402
from src.infra.auth import BcryptPasswordHasher, JWTSessionTokenService  # noqa: E402
from src.infra.config import Settings  # noqa: E402


class InMemoryAccountRepository:
    """テスト用のインメモリ AccountRepository"""

    def __init__(self):
        self.accounts: Dict[int, AccountEntity] = {}
        self._next_id = 1

    def get(self, account_id: int) -> AccountEntity:
        if account_id not in self.accounts:
            raise AccountNotFoundError(account_id)
        return self.accounts[account_id]

    def get_by_number(self, number: int) -> AccountEntity:
        for account in self.accounts.values():
            if account.number == number:
                return account
        raise AccountNotFoundError(number, lookup="number")

    def save(self, account: AccountEntity) -> AccountEntity:
        account.id = self._next_id
        self._next_id += 1
        self.accounts[account.id] = account
        return account

    def delete(self, account_id: int) -> None:
        if self.accounts.pop(account_id, None) is None:
            raise AccountNotFoundError(account_id)

    def list(self) -> List[AccountEntity]:
        return list(self.accounts.values())

    def update(self, account: AccountEntity) -> None:
        self.get(account.id)
        self.accounts[account.id] = account


@pytest.fixture
def fast_hasher():
    """コスト係数を下げた bcrypt ハッシャー（テスト高速化用）"""
    return BcryptPasswordHasher(CryptContext(schemes=["bcrypt"], bcrypt__rounds=4))


@pytest.fixture
def token_service():
    return JWTSessionTokenService(SecretStr(TEST_SECRET))


@pytest.fixture
def memory_repository():
    return InMemoryAccountRepository()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'bank.db'}"


@pytest.fixture
def test_settings(database_url):
    return Settings(
        jwt_secret=TEST_SECRET,
        database_url=database_url,
        environment="test",
        rate_limit_enabled=False,
    )


@pytest.fixture
def app(test_settings, fast_hasher):
    from src.infra.rest_api.main import create_app
    from src.infra.rest_api.dependencies import get_password_hasher_dependency

    application = create_app(test_settings)
    application.dependency_overrides[get_password_hasher_dependency] = lambda: fast_hasher
    return application


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


def create_account_via_api(client, first_name="A", last_name="B", password="pw"):
    """POST /create を呼び出し、(レスポンスJSON, トークン) を返す"""
    response = client.post(
        "/create",
        json={"firstName": first_name, "lastName": last_name, "password": password},
    )
    assert response.status_code == 200, response.text
    token = response.headers["Authorization"].split(" ", 1)[1]
    return response.json(), token
