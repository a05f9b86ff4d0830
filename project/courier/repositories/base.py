# courier/repositories/base.py

"""
Порт хранилища заказов.

Сервисы работают только с этим интерфейсом; реализация на SQLAlchemy
используется приложением, реализация в памяти нужна тестам.
"""

from abc import ABC, abstractmethod
from typing import Optional

from courier.models.order import Order as OrderModel
from courier.models.user import User as UserModel
from courier.schemas.order import OrderSummary


class OrderRepository(ABC):

    @abstractmethod
    async def create_order(self, order: OrderModel) -> int:
        """Сохраняет заказ целиком (с посчитанными сборами) и возвращает consignment id."""
        ...

    @abstractmethod
    async def find_user_by_username(self, username: str) -> Optional[UserModel]:
        """Пользователь по логину или None, если такого нет."""
        ...

    @abstractmethod
    async def list_orders(
        self, transfer_status: str, archive: bool, limit: int, page: int, owner_id: int
    ) -> tuple[list[OrderSummary], int]:
        """
        Страница заказов владельца с точным совпадением статуса и флага архива.

        total считается только по статусу и архиву, без фильтра по владельцу.
        """
        ...

    @abstractmethod
    async def cancel_order(self, consignment_id: int) -> None:
        """
        Переводит заказ в Cancelled одной условной операцией.
        Если заказ уже отменён или не найден → OrderNotCancellable.
        """
        ...


def page_offset(limit: int, page: int) -> int:
    return (page - 1) * limit


def to_summary(order: OrderModel) -> OrderSummary:
    created_at = order.created_at.isoformat() if order.created_at is not None else ""
    return OrderSummary(
        order_consignment_id=str(order.id),
        order_created_at=created_at,
        order_description=order.item_description or "",
        merchant_order_id=order.merchant_order_id or "",
        recipient_name=order.recipient_name,
        recipient_address=order.recipient_address,
        recipient_phone=order.recipient_phone,
        order_amount=order.amount_to_collect,
        delivery_fee=order.delivery_fee,
        cod_fee=order.cod_fee,
        promo_discount=order.promo_discount,
        discount=order.discount,
        order_status=order.order_status,
        order_type=str(order.order_type_id),
        item_type=str(order.item_type),
        instruction=order.special_instruction or None,
        total_fee=order.total_fee,
    )
