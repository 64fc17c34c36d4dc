from dataclasses import dataclass

from ...domain.entity.account_entity import AccountEntity

@dataclass
class CreateAccountDTO:
    """
    口座作成用DTO
    """
    first_name: str
    last_name: str
    raw_password: str

@dataclass
class LoginDTO:
    """
    ログイン用DTO
    """
    number: int
    raw_password: str

@dataclass
class TransferDTO:
    """
    送金リクエストDTO
    """
    to_account: int
    amount: int

@dataclass
class IssuedSessionDTO:
    """
    口座と発行済みセッショントークンの組
    """
    account: AccountEntity
    token: str
