# courier/main.py

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from dotenv import load_dotenv
from contextlib import asynccontextmanager

from courier.config import settings
from courier.utils.log import Log
from courier.utils.database import engine, init_db
from courier.utils.responses import error_response, internal_error
from courier.utils.security import TokenService
from courier.middleware.db_middleware import DBSessionMiddleware

import multiprocessing
import os

# --- загрузка переменных окружения ---
load_dotenv()

# --- sync логгер для раннего старта ---
boot_log = Log(settings.LOG_DIR, settings.log_print)
if os.environ.get("RUN_MAIN") == "true" or multiprocessing.current_process().name == "MainProcess":
    boot_log.log_info_sync(target="startup", message="Импорты main.py выполнены")

# ────────────── Lifespan ──────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    boot_log.log_info_sync(target="startup", message="lifespan: startup начат")

    # Инициализация БД
    await init_db()
    boot_log.log_info_sync(target="startup", message="База инициализирована")

    app.state.log = Log(settings.LOG_DIR, settings.log_print)
    await app.state.log.log_info(target="startup", message="Async Log инициализирован")

    yield

    # shutdown
    await app.state.log.log_info(target="shutdown", message="Остановка приложения")
    await app.state.log.shutdown()
    await engine.dispose()
    boot_log.log_info_sync(target="shutdown", message="Log корректно завершён")

# ────────────── Создаём FastAPI приложение ──────────────
app = FastAPI(title="Courier Orders API", lifespan=lifespan)

# Секрет подписи передаётся сервису токенов один раз, при сборке приложения
app.state.tokens = TokenService(
    secret_key=settings.AUTH_SECRET_KEY,
    access_expire_minutes=settings.AUTH_TOKEN_EXPIRE_MINUTES,
    refresh_expire_minutes=settings.AUTH_REFRESH_EXPIRE_MINUTES,
    issuer=settings.AUTH_ISSUER,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# DB middleware для request.state.db
app.add_middleware(DBSessionMiddleware)


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    log = getattr(request.app.state, "log", None)
    if log:
        await log.log_warning("order", "Некорректное тело запроса", {"path": request.url.path, "errors": exc.errors()})
    return error_response("Invalid request body", 400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log = getattr(request.app.state, "log", None)
    if log:
        await log.log_error("app", f"Необработанная ошибка: {exc!r}", {"path": request.url.path})
    return internal_error()


@app.get("/")
def read_root():
    return {"message": "Courier Orders API"}

# ────────────── Подключение роутов ──────────────
from courier.routes import auth, order

app.include_router(auth.router, prefix="/api/v1", tags=["auth"])
app.include_router(order.router, prefix="/api/v1/orders", tags=["order"])

# ────────────── Запуск uvicorn ──────────────
if __name__ == "__main__":
    boot_log.log_info_sync(target="startup", message="Запуск uvicorn.run")
    uvicorn.run(
        "courier.main:app",
        host="0.0.0.0",
        port=8080,
        log_level="info",
        reload=True
    )
