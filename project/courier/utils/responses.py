# courier/utils/responses.py
# Конверт ответа {message, type, code[, data | errors]}

from fastapi.responses import JSONResponse


def envelope(message: str, code: int = 200, type_: str = "success", **extra) -> dict:
    body = {"message": message, "type": type_, "code": code}
    body.update(extra)
    return body


def error_response(message: str, code: int, **extra) -> JSONResponse:
    return JSONResponse(status_code=code, content=envelope(message, code, "error", **extra))


INTERNAL_ERROR_MESSAGE = "Internal server error"


def internal_error() -> JSONResponse:
    return error_response(INTERNAL_ERROR_MESSAGE, 500)
