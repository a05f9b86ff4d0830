# courier/routes/deps.py

from fastapi import Request

from courier.repositories import OrderRepository, SQLOrderRepository
from courier.utils.log import Log


def get_order_repository(request: Request) -> OrderRepository:
    """Репозиторий поверх сессии запроса (её открывает DBSessionMiddleware)."""
    return SQLOrderRepository(request.state.db)


def get_log(request: Request) -> Log:
    return request.app.state.log
