import logging

from ...port.account_repository import AccountRepository
from ...port.password_hasher import PasswordHasher
from ...port.session_token import SessionTokenService
from ...port.dto.account_dto import LoginDTO, IssuedSessionDTO
from ...domain.exception.auth_exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class LoginAccountUseCase:
    """
    口座番号とパスワードによるログイン

    口座が存在しない場合は AccountNotFoundError をそのまま伝播する。
    パスワード不一致の場合はトークンを発行せず AuthenticationError を送出する。
    """
    def __init__(
        self,
        account_repository: AccountRepository,
        password_hasher: PasswordHasher,
        token_service: SessionTokenService,
    ):
        self.account_repository = account_repository
        self.password_hasher = password_hasher
        self.token_service = token_service

    def execute(self, dto: LoginDTO) -> IssuedSessionDTO:
        account = self.account_repository.get_by_number(dto.number)

        if not self.password_hasher.verify(dto.raw_password, account.password_hash):
            logger.warning("Login attempt with incorrect password", extra={"account_number": dto.number})
            raise AuthenticationError("Incorrect password")

        token = self.token_service.issue(account)
        logger.info("Account logged in", extra={"account_id": account.id})
        return IssuedSessionDTO(account=account, token=token)
