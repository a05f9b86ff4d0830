# courier/repositories/memory.py

"""
Хранилище заказов в памяти с той же семантикой, что и SQL вариант.
Используется в тестах и для локальных экспериментов без базы.
"""

import itertools
from datetime import datetime, timezone
from typing import Optional

from courier.exceptions import OrderNotCancellable
from courier.models.order import Order as OrderModel, ORDER_STATUS_CANCELLED, ORDER_STATUS_PENDING
from courier.models.user import User as UserModel
from courier.repositories.base import OrderRepository, page_offset, to_summary
from courier.schemas.order import OrderSummary


class InMemoryOrderRepository(OrderRepository):

    def __init__(self):
        self.orders: dict[int, OrderModel] = {}
        self.users: dict[str, UserModel] = {}
        self._order_ids = itertools.count(1)
        self._user_ids = itertools.count(1)

    def add_user(self, username: str, password: str = "") -> UserModel:
        user = UserModel(id=next(self._user_ids), username=username, password=password)
        self.users[username] = user
        return user

    async def create_order(self, order: OrderModel) -> int:
        order.id = next(self._order_ids)
        if order.order_status is None:
            order.order_status = ORDER_STATUS_PENDING
        if order.archive is None:
            order.archive = False
        if order.created_at is None:
            order.created_at = datetime.now(timezone.utc)
        self.orders[order.id] = order
        return order.id

    async def find_user_by_username(self, username: str) -> Optional[UserModel]:
        return self.users.get(username)

    async def list_orders(
        self, transfer_status: str, archive: bool, limit: int, page: int, owner_id: int
    ) -> tuple[list[OrderSummary], int]:
        matching = [
            o for _, o in sorted(self.orders.items())
            if o.order_status == transfer_status and o.archive == archive
        ]
        owned = [o for o in matching if o.user_id == owner_id]
        offset = page_offset(limit, page)
        return [to_summary(o) for o in owned[offset:offset + limit]], len(matching)

    async def cancel_order(self, consignment_id: int) -> None:
        order = self.orders.get(consignment_id)
        if order is None or order.order_status == ORDER_STATUS_CANCELLED:
            raise OrderNotCancellable(consignment_id)
        order.order_status = ORDER_STATUS_CANCELLED
