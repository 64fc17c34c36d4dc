from typing import Annotated
from fastapi import APIRouter, Depends, Request, Response
from slowapi import Limiter
from src.infra.logging_config import get_logger
from src.infra.rest_api.rate_limiter import LOGIN_RATE_LIMIT
from ..dependencies import get_login_account_usecase
from ..schemas import LoginRequest, LoginResponse
from ....port.dto.account_dto import LoginDTO
from ....usecase.account_management.login_account import LoginAccountUseCase

logger = get_logger("api.auth")


def create_router(limiter: Limiter) -> APIRouter:
    router = APIRouter(tags=["auth"])

    @router.post("/login", response_model=LoginResponse)
    @limiter.limit(LOGIN_RATE_LIMIT)
    def login(
        request: Request,
        response: Response,
        req: LoginRequest,
        usecase: Annotated[LoginAccountUseCase, Depends(get_login_account_usecase)],
    ):
        issued = usecase.execute(LoginDTO(number=req.number, raw_password=req.password))
        response.headers["Authorization"] = f"Bearer {issued.token}"

        return LoginResponse(
            number=issued.account.number,
            access_token=issued.token,
            token_type="bearer",
        )

    return router
