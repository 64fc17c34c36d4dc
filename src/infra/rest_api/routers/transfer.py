from typing import Annotated
from fastapi import APIRouter, Depends
from src.infra.logging_config import get_logger
from ..dependencies import get_transfer_funds_usecase, require_session
from ..schemas import TransferRequest, TransferResponse
from ....domain.entity.session_claims import SessionClaims
from ....port.dto.account_dto import TransferDTO
from ....usecase.account_management.transfer_funds import TransferFundsUseCase

router = APIRouter(tags=["transfer"])
logger = get_logger("api.transfer")


@router.post("/transfer", response_model=TransferResponse)
def transfer(
    req: TransferRequest,
    claims: Annotated[SessionClaims, Depends(require_session)],
    usecase: Annotated[TransferFundsUseCase, Depends(get_transfer_funds_usecase)],
):
    """
    送金リクエストを受け付けて内容をそのまま返す

    有効なトークンのみを要求し、送金元口座の所有者チェックは行わない。
    """
    accepted = usecase.execute(TransferDTO(to_account=req.to_account, amount=req.amount))
    logger.info("Transfer accepted", extra={"to_account": accepted.to_account, "amount": accepted.amount})
    return TransferResponse(to_account=accepted.to_account, amount=accepted.amount)
