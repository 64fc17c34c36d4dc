from ...port.dto.account_dto import TransferDTO
from ...domain.entity.account_entity import ACCOUNT_NUMBER_UPPER_BOUND
from ...domain.exception.account_exceptions import AccountValidationError


class TransferFundsUseCase:
    """
    送金リクエストの受付

    現状は入力検証のみを行い、残高は変更しない。
    """

    def execute(self, dto: TransferDTO) -> TransferDTO:
        if not 0 <= dto.to_account < ACCOUNT_NUMBER_UPPER_BOUND:
            raise AccountValidationError(f"Invalid target account number: {dto.to_account}")
        if dto.amount <= 0:
            raise AccountValidationError("Transfer amount must be positive")
        # TODO: 2口座間のアトミックな借方・貸方処理と残高不足の拒否を実装する
        return dto
