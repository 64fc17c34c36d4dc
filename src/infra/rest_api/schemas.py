from datetime import datetime
from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ...domain.entity.account_entity import AccountEntity, ACCOUNT_NUMBER_UPPER_BOUND

AccountNumber = Annotated[int, Field(ge=0, lt=ACCOUNT_NUMBER_UPPER_BOUND)]
Name = Annotated[str, Field(min_length=1, max_length=255)]


class CreateAccountRequest(BaseModel):
    first_name: Name = Field(alias="firstName")
    last_name: Name = Field(alias="lastName")
    password: Annotated[str, Field(min_length=1)]

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty or whitespace only')
        return v.strip()


class LoginRequest(BaseModel):
    number: AccountNumber = Field(validation_alias=AliasChoices("number", "accountNumber"))
    password: Annotated[str, Field(min_length=1)]


class LoginResponse(BaseModel):
    number: int
    access_token: str
    token_type: str = "bearer"


class TransferRequest(BaseModel):
    to_account: int = Field(alias="toAccount")
    amount: int

    model_config = ConfigDict(populate_by_name=True)


class TransferResponse(BaseModel):
    to_account: int = Field(serialization_alias="toAccount")
    amount: int


class AccountResponse(BaseModel):
    """口座の外部表現。パスワードハッシュは含めない"""
    id: int
    first_name: str = Field(serialization_alias="firstName")
    last_name: str = Field(serialization_alias="lastName")
    number: int
    balance: int
    created_at: datetime | None = Field(serialization_alias="createdAt")

    @classmethod
    def from_entity(cls, account: AccountEntity) -> "AccountResponse":
        return cls(
            id=account.id,
            first_name=account.first_name,
            last_name=account.last_name,
            number=account.number,
            balance=account.balance,
            created_at=account.created_at,
        )


class DeleteAccountResponse(BaseModel):
    deleted: int
