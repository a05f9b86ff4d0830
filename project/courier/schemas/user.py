# courier/schemas/user.py

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """
    Тело запроса на логин.
    """
    username: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    token_type: str = "Bearer"
    expires_in: int
    access_token: str
    refresh_token: str
