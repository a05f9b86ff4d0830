# courier/utils/security.py

"""
Хэширование паролей и выпуск/проверка JWT токенов.
Пароли хэшируются через passlib (sha256_crypt), токены подписываются HS256 (PyJWT).
Секрет для подписи передаётся в TokenService явно, окружение здесь не читается.
"""

from datetime import datetime, timedelta, timezone

from jwt import encode, decode, InvalidTokenError
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["sha256_crypt"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def hash_password(password: str) -> str:
    """
    Хэширует пароль.

    :param password: строка пароля пользователя
    :return: хэшированный пароль в виде строки
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Проверяет совпадение пароля с его хэшем.
    Испорченный хэш в базе считается несовпадением.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


class TokenService:
    """Выпуск и проверка bearer токенов для логина мерчанта."""

    def __init__(
        self,
        secret_key: str,
        access_expire_minutes: int,
        refresh_expire_minutes: int,
        issuer: str,
        algorithm: str = "HS256",
    ):
        self.secret_key = secret_key
        self.access_expire = timedelta(minutes=access_expire_minutes)
        self.refresh_expire = timedelta(minutes=refresh_expire_minutes)
        self.issuer = issuer
        self.algorithm = algorithm

    @property
    def expires_in(self) -> int:
        """Время жизни access токена в секундах."""
        return int(self.access_expire.total_seconds())

    def _issue(self, username: str, token_type: str, lifetime: timedelta) -> str:
        claims = {
            "sub": username,
            "iss": self.issuer,
            "typ": token_type,
            "exp": datetime.now(timezone.utc) + lifetime,
        }
        return encode(claims, self.secret_key, algorithm=self.algorithm)

    def issue_access_token(self, username: str) -> str:
        return self._issue(username, ACCESS_TOKEN, self.access_expire)

    def issue_refresh_token(self, username: str) -> str:
        return self._issue(username, REFRESH_TOKEN, self.refresh_expire)

    def verify(self, token: str) -> str:
        """
        Проверяет access токен и возвращает username.
        Истёкший токен → ExpiredSignatureError, любой другой дефект → InvalidTokenError.
        """
        payload = decode(
            token,
            self.secret_key,
            algorithms=[self.algorithm],
            issuer=self.issuer,
            options={"require": ["exp", "sub"]},
        )
        if payload.get("typ") != ACCESS_TOKEN:
            raise InvalidTokenError("not an access token")

        username = payload.get("sub")
        if not isinstance(username, str) or not username:
            raise InvalidTokenError("token has no username")
        return username
