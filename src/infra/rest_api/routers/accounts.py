from typing import Annotated, List

from fastapi import APIRouter, Depends, Request, Response
from slowapi import Limiter

from ..dependencies import (
    get_account_repository_dependency,
    get_create_account_usecase,
    require_account_owner,
)
from ..rate_limiter import CREATE_RATE_LIMIT
from ..schemas import AccountResponse, CreateAccountRequest, DeleteAccountResponse
from ....port.account_repository import AccountRepository
from ....port.dto.account_dto import CreateAccountDTO
from ....usecase.access_control.access_gate import AdmittedRequest
from ....usecase.account_management.create_account import CreateAccountUseCase
from src.infra.logging_config import get_logger

logger = get_logger("api.accounts")


def create_router(limiter: Limiter) -> APIRouter:
    """口座エンドポイントのルーターを作成する（レート制限はアプリケーション単位）"""
    router = APIRouter(tags=["accounts"])

    @router.post("/create", response_model=AccountResponse)
    @limiter.limit(CREATE_RATE_LIMIT)
    def create_account(
        request: Request,
        response: Response,
        req: CreateAccountRequest,
        usecase: Annotated[CreateAccountUseCase, Depends(get_create_account_usecase)],
    ):
        """
        口座を作成し、Authorizationヘッダーでセッショントークンを返す
        """
        dto = CreateAccountDTO(
            first_name=req.first_name,
            last_name=req.last_name,
            raw_password=req.password,
        )
        issued = usecase.execute(dto)
        response.headers["Authorization"] = f"Bearer {issued.token}"

        logger.info("Account created", extra={"account_id": issued.account.id})
        return AccountResponse.from_entity(issued.account)

    @router.get("/accounts/{id}", response_model=AccountResponse)
    def get_account(
        admitted: Annotated[AdmittedRequest, Depends(require_account_owner)],
        repository: Annotated[AccountRepository, Depends(get_account_repository_dependency)],
    ):
        # ゲート通過後に削除された場合は AccountNotFoundError になる
        account = repository.get(admitted.account.id)
        return AccountResponse.from_entity(account)

    @router.get("/list_accounts", response_model=List[AccountResponse])
    def list_accounts(
        repository: Annotated[AccountRepository, Depends(get_account_repository_dependency)],
    ):
        return [AccountResponse.from_entity(account) for account in repository.list()]

    @router.delete("/accounts/{id}/delete", response_model=DeleteAccountResponse)
    def delete_account(
        admitted: Annotated[AdmittedRequest, Depends(require_account_owner)],
        repository: Annotated[AccountRepository, Depends(get_account_repository_dependency)],
    ):
        """
        口座を物理削除する（取り消し不可）
        """
        account_id = admitted.account.id
        repository.delete(account_id)
        logger.info("Account deleted", extra={"account_id": account_id})
        return DeleteAccountResponse(deleted=account_id)

    return router
