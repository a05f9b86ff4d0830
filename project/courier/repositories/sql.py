# courier/repositories/sql.py

from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from courier.exceptions import OrderNotCancellable
from courier.models.order import Order as OrderModel, ORDER_STATUS_CANCELLED
from courier.models.user import User as UserModel
from courier.repositories.base import OrderRepository, page_offset, to_summary
from courier.schemas.order import OrderSummary


class SQLOrderRepository(OrderRepository):
    """Хранилище заказов поверх AsyncSession запроса."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_order(self, order: OrderModel) -> int:
        self.session.add(order)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(order)
        return order.id

    async def find_user_by_username(self, username: str) -> Optional[UserModel]:
        result = await self.session.execute(select(UserModel).where(UserModel.username == username))
        return result.scalar_one_or_none()

    async def list_orders(
        self, transfer_status: str, archive: bool, limit: int, page: int, owner_id: int
    ) -> tuple[list[OrderSummary], int]:
        rows_query = (
            select(OrderModel)
            .where(
                OrderModel.order_status == transfer_status,
                OrderModel.archive == archive,
                OrderModel.user_id == owner_id,
            )
            .order_by(OrderModel.id)
            .limit(limit)
            .offset(page_offset(limit, page))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(rows_query)
        orders = [to_summary(o) for o in result.scalars().all()]

        # общее количество без фильтра по владельцу
        count_query = (
            select(func.count())
            .select_from(OrderModel)
            .where(OrderModel.order_status == transfer_status, OrderModel.archive == archive)
        )
        total = (await self.session.execute(count_query)).scalar_one()

        return orders, total

    async def cancel_order(self, consignment_id: int) -> None:
        # одна условная запись: две параллельные отмены не могут обе пройти
        statement = (
            update(OrderModel)
            .where(OrderModel.id == consignment_id, OrderModel.order_status != ORDER_STATUS_CANCELLED)
            .values(order_status=ORDER_STATUS_CANCELLED)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if result.rowcount == 0:
            raise OrderNotCancellable(consignment_id)
