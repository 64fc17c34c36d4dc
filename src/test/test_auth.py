import pytest
from datetime import datetime, timedelta, timezone
from jose import jwt
from pydantic import SecretStr

from conftest import TEST_SECRET


def make_account(number=100, account_id=1):
    from src.domain.entity.account_entity import AccountEntity
    return AccountEntity(
        id=account_id,
        first_name="Ada",
        last_name="Lovelace",
        number=number,
        password_hash="unused",
    )


class FrozenClock:
    """テスト用の固定時計"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class TestPasswordHasher:
    """Test password hashing without external dependencies"""

    def test_password_hashing(self, fast_hasher):
        """Test password hashing and verification"""
        plain_password = "mysecretpassword"
        hashed = fast_hasher.hash(plain_password)

        assert hashed != plain_password
        assert fast_hasher.verify(plain_password, hashed) is True
        assert fast_hasher.verify("wrongpassword", hashed) is False

    def test_hash_is_salted(self, fast_hasher):
        """同じパスワードでも毎回異なるハッシュになる"""
        first = fast_hasher.hash("same-password")
        second = fast_hasher.hash("same-password")

        assert first != second
        assert fast_hasher.verify("same-password", first)
        assert fast_hasher.verify("same-password", second)

    def test_default_hasher_uses_bcrypt(self):
        from src.infra.auth import BcryptPasswordHasher

        hashed = BcryptPasswordHasher().hash("pw")
        assert hashed.startswith("$2")

    def test_verify_returns_false_for_malformed_hash(self, fast_hasher):
        assert fast_hasher.verify("pw", "not-a-bcrypt-hash") is False
        assert fast_hasher.verify("pw", "") is False

    def test_hash_failure_is_wrapped(self, fast_hasher, monkeypatch):
        from src.domain.exception.auth_exceptions import HashingFailure

        def exhausted(*args, **kwargs):
            raise OSError("entropy source unavailable")

        monkeypatch.setattr(fast_hasher.context, "hash", exhausted)

        with pytest.raises(HashingFailure):
            fast_hasher.hash("pw")


class TestSessionTokenService:
    """Test session token issuing and verification"""

    def test_issue_and_verify_round_trip(self, token_service):
        """発行直後のトークンは検証に成功し、口座番号が一致する"""
        account = make_account(number=123456789012345)

        token = token_service.issue(account)
        claims = token_service.verify(token)

        assert isinstance(token, str)
        assert claims.account_number == 123456789012345

    def test_token_expires_after_fifteen_minutes(self, token_service):
        token = token_service.issue(make_account())
        claims = token_service.verify(token)

        assert claims.expires_at - claims.issued_at == 15 * 60

    def test_token_payload_uses_configured_algorithm(self):
        from src.infra.auth import JWTSessionTokenService

        service = JWTSessionTokenService(SecretStr(TEST_SECRET), algorithm="HS512")
        token = service.issue(make_account(number=42))

        assert jwt.get_unverified_header(token)["alg"] == "HS512"
        assert service.verify(token).account_number == 42

    def test_expired_token_is_rejected(self):
        from src.infra.auth import JWTSessionTokenService
        from src.domain.exception.auth_exceptions import TokenExpiredError

        issued_at = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        clock = FrozenClock(issued_at)
        service = JWTSessionTokenService(SecretStr(TEST_SECRET), clock=clock)
        token = service.issue(make_account())

        clock.now = issued_at + timedelta(minutes=16)
        with pytest.raises(TokenExpiredError):
            service.verify(token)

    def test_token_is_expired_exactly_at_expiration(self):
        """有効期限ちょうどの時刻は期限切れとして扱う"""
        from src.infra.auth import JWTSessionTokenService
        from src.domain.exception.auth_exceptions import TokenExpiredError

        issued_at = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        clock = FrozenClock(issued_at)
        service = JWTSessionTokenService(SecretStr(TEST_SECRET), clock=clock)
        token = service.issue(make_account())

        clock.now = issued_at + timedelta(minutes=15) - timedelta(seconds=1)
        assert service.verify(token).account_number == 100

        clock.now = issued_at + timedelta(minutes=15)
        with pytest.raises(TokenExpiredError):
            service.verify(token)

    def test_token_signed_with_other_secret_is_rejected(self, token_service):
        from src.infra.auth import JWTSessionTokenService
        from src.domain.exception.auth_exceptions import InvalidSignatureError

        forger = JWTSessionTokenService(SecretStr("another-secret-key-that-is-also-32-characters"))
        token = forger.issue(make_account(number=100))

        with pytest.raises(InvalidSignatureError):
            token_service.verify(token)

    def test_token_with_unexpected_algorithm_is_rejected(self, token_service):
        from src.domain.exception.auth_exceptions import InvalidSignatureError

        exp = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"account": 100, "iat": 0, "exp": exp}, TEST_SECRET, algorithm="HS384")

        with pytest.raises(InvalidSignatureError):
            token_service.verify(token)

    def test_tampered_claims_are_rejected(self, token_service):
        """ペイロードを書き換えたトークンは署名検証で失敗する"""
        from src.domain.exception.auth_exceptions import InvalidSignatureError

        token = token_service.issue(make_account(number=100))
        other = token_service.issue(make_account(number=200))
        header, _, signature = token.split(".")
        _, payload, _ = other.split(".")

        with pytest.raises(InvalidSignatureError):
            token_service.verify(f"{header}.{payload}.{signature}")

    @pytest.mark.parametrize("token", ["", "invalid", "invalid.token.here", "a.b", "!!!.???.###"])
    def test_malformed_token_is_rejected(self, token_service, token):
        from src.domain.exception.auth_exceptions import MalformedTokenError

        with pytest.raises(MalformedTokenError):
            token_service.verify(token)

    def test_token_without_account_claim_is_rejected(self, token_service):
        from src.domain.exception.auth_exceptions import MalformedTokenError

        exp = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"sub": "someone", "iat": 0, "exp": exp}, TEST_SECRET, algorithm="HS256")

        with pytest.raises(MalformedTokenError):
            token_service.verify(token)

    def test_token_with_non_integer_account_claim_is_rejected(self, token_service):
        from src.domain.exception.auth_exceptions import MalformedTokenError

        exp = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"account": "100", "iat": 0, "exp": exp}, TEST_SECRET, algorithm="HS256")

        with pytest.raises(MalformedTokenError):
            token_service.verify(token)

    def test_signed_token_with_invalid_iat_is_malformed(self, token_service):
        """署名は正しいが標準クレームが不正なトークンは形式不正として扱う"""
        from src.domain.exception.auth_exceptions import MalformedTokenError

        exp = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"account": 100, "iat": "not-a-number", "exp": exp}, TEST_SECRET, algorithm="HS256")

        with pytest.raises(MalformedTokenError):
            token_service.verify(token)

    def test_verification_errors_share_a_base_class(self):
        from src.domain.exception.auth_exceptions import (
            VerificationError,
            MalformedTokenError,
            InvalidSignatureError,
            TokenExpiredError,
        )

        assert issubclass(MalformedTokenError, VerificationError)
        assert issubclass(InvalidSignatureError, VerificationError)
        assert issubclass(TokenExpiredError, VerificationError)

    def test_empty_secret_raises_signing_failure(self):
        from src.infra.auth import JWTSessionTokenService
        from src.domain.exception.auth_exceptions import SigningFailure

        service = JWTSessionTokenService(SecretStr(""))

        with pytest.raises(SigningFailure):
            service.issue(make_account())

    def test_repr_does_not_expose_secret(self, token_service):
        assert TEST_SECRET not in repr(token_service)
