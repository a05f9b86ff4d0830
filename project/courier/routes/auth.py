# courier/routes/auth.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jwt import ExpiredSignatureError, InvalidTokenError
from sqlalchemy.exc import SQLAlchemyError

from courier.repositories import OrderRepository
from courier.routes.deps import get_log, get_order_repository
from courier.schemas.user import LoginRequest, LoginResponse
from courier.utils.log import Log
from courier.utils.responses import envelope, error_response, internal_error
from courier.utils.security import TokenService, verify_password

router = APIRouter()

# ────────────── JWT ──────────────
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/login", auto_error=False)


def unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_username(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    log: Log = Depends(get_log),
) -> str:
    """
    Проверяет bearer токен и возвращает username.

    **Статусы:**
    - 401 Unauthorized – токен отсутствует, истёк или неверный
    """
    if not token:
        await log.log_warning("auth", "Запрос без токена", {"path": request.url.path})
        raise unauthorized()

    tokens: TokenService = request.app.state.tokens
    try:
        username = tokens.verify(token)
    except ExpiredSignatureError:
        await log.log_warning("auth", "Токен истёк")
        raise unauthorized()
    except InvalidTokenError as e:
        await log.log_warning("auth", f"Неверный токен: {e}")
        raise unauthorized()

    return username


# ────────────── LOGIN ──────────────
@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Получение JWT токена",
    responses={
        200: {"description": "Токен выдан"},
        400: {"description": "Неверный логин или пароль, либо некорректное тело запроса"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def login(
    request: Request,
    body: LoginRequest,
    repo: OrderRepository = Depends(get_order_repository),
    log: Log = Depends(get_log),
):
    """
    Проверяет логин и пароль мерчанта и выдаёт пару access/refresh токенов.
    """
    try:
        user = await repo.find_user_by_username(body.username)
    except SQLAlchemyError as e:
        await log.log_error("auth", f"Ошибка при поиске пользователя: {e}", {"username": body.username})
        return internal_error()

    if user is None or not verify_password(body.password, user.password):
        await log.log_warning("auth", "Неудачная попытка входа", {"username": body.username})
        return error_response("The user credentials were incorrect.", 400)

    tokens: TokenService = request.app.state.tokens
    await log.log_info("auth", "Пользователь авторизован", {"username": user.username})
    return LoginResponse(
        token_type="Bearer",
        expires_in=tokens.expires_in,
        access_token=tokens.issue_access_token(user.username),
        refresh_token=tokens.issue_refresh_token(user.username),
    )


# ────────────── LOGOUT ──────────────
@router.post(
    "/logout",
    summary="Выход",
    responses={
        200: {"description": "Выход выполнен"},
        401: {"description": "Отсутствует или неверный токен"},
    },
)
async def logout(username: str = Depends(get_current_username), log: Log = Depends(get_log)):
    """
    Токены не хранятся на сервере, клиент просто удаляет свой токен.
    """
    await log.log_info("auth", "Пользователь вышел", {"username": username})
    return envelope("Successfully logged out")
