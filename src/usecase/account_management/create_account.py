from ...port.account_repository import AccountRepository
from ...port.password_hasher import PasswordHasher
from ...port.session_token import SessionTokenService
from ...port.dto.account_dto import CreateAccountDTO, IssuedSessionDTO
from ...domain.entity.account_entity import new_account
from ...domain.exception.account_exceptions import AccountValidationError

# bcrypt は72バイトを超える入力を切り詰めるため上限を設ける
MAX_PASSWORD_BYTES = 72


class CreateAccountUseCase:
    """
    口座作成のユースケース実装

    パスワードをハッシュ化して口座を永続化し、その口座用のセッショントークンを発行する。
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

    def execute(self, dto: CreateAccountDTO) -> IssuedSessionDTO:
        if not dto.raw_password:
            raise AccountValidationError("Password must not be empty")
        if len(dto.raw_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise AccountValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
            )

        password_hash = self.password_hasher.hash(dto.raw_password)
        account = new_account(dto.first_name, dto.last_name, password_hash)
        saved = self.account_repository.save(account)

        token = self.token_service.issue(saved)
        return IssuedSessionDTO(account=saved, token=token)
