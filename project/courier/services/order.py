# courier/services/order.py

import re

from courier.exceptions import InvalidArchiveFilter, InvalidOrder, OrderNotCancellable, UserNotFound
from courier.models.order import Order as OrderModel, ORDER_STATUS_PENDING
from courier.models.user import User as UserModel
from courier.repositories.base import OrderRepository
from courier.schemas.order import OrderCreate, OrderCreated, OrderPage
from courier.services.fees import calculate_fees
from courier.services.validation import validate_order
from courier.utils.log import Log

DEFAULT_LIMIT = 10
DEFAULT_PAGE = 1

# transfer_status=1 → Pending, всё остальное → Cancel
TRANSFER_STATUS_PENDING = "Pending"
TRANSFER_STATUS_CANCEL = "Cancel"

# Литералы boolean, которые понимает PostgreSQL
ARCHIVE_TRUE = {"t", "true", "y", "yes", "on", "1"}
ARCHIVE_FALSE = {"f", "false", "n", "no", "off", "0"}

# Только ASCII цифры со знаком: "1_000" и "١٢" не принимаются
CONSIGNMENT_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_positive_int(raw: str | None, default: int) -> int:
    """Число из query-параметра; пусто, мусор или < 1 → default."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def parse_archive_flag(raw: str | None) -> bool:
    """Флаг архива из query-параметра; пусто → False, неизвестное значение → InvalidArchiveFilter."""
    if raw is None or raw.strip() == "":
        return False
    value = raw.strip().lower()
    if value in ARCHIVE_TRUE:
        return True
    if value in ARCHIVE_FALSE:
        return False
    raise InvalidArchiveFilter(raw)


def parse_consignment_id(raw: str) -> int:
    """Consignment id из пути; не число → ValueError."""
    if not CONSIGNMENT_ID_PATTERN.fullmatch(raw):
        raise ValueError(f"invalid consignment id: {raw!r}")
    return int(raw)


def transfer_status_filter(raw: str | None) -> str:
    return TRANSFER_STATUS_PENDING if raw == "1" else TRANSFER_STATUS_CANCEL


def last_page_for(total: int, limit: int) -> int:
    return (total + limit - 1) // limit


async def resolve_owner(username: str, repo: OrderRepository, log: Log) -> UserModel:
    user = await repo.find_user_by_username(username)
    if user is None:
        await log.log_warning("order", "Пользователь из токена не найден", {"username": username})
        raise UserNotFound(username)
    return user


async def create_order_service(
    order: OrderCreate, username: str, repo: OrderRepository, log: Log
) -> OrderCreated:
    """
    Создание заказа: владелец → проверка полей → расчёт сборов → запись.
    Сборы считаются один раз здесь и дальше не пересчитываются.
    """
    user = await resolve_owner(username, repo, log)

    errors = validate_order(order)
    if errors:
        await log.log_info("order", "Заказ не прошёл проверку", {"errors": errors.as_dict()})
        raise InvalidOrder(errors)

    fees = calculate_fees(order.recipient_city, order.item_weight, order.amount_to_collect)

    db_order = OrderModel(
        user_id=user.id,
        **order.model_dump(),
        order_type_id=1,
        total_fee=fees.total_fee,
        cod_fee=fees.cod_fee,
        promo_discount=0.0,
        discount=0.0,
        delivery_fee=fees.delivery_fee,
        archive=False,
    )
    consignment_id = await repo.create_order(db_order)

    await log.log_info("order", "Заказ создан", {
        "consignment_id": consignment_id,
        "user_id": user.id,
        "delivery_fee": fees.delivery_fee,
        "total_fee": fees.total_fee,
    })
    return OrderCreated(
        consignment_id=consignment_id,
        merchant_order_id=order.merchant_order_id,
        order_status=ORDER_STATUS_PENDING,
        delivery_fee=fees.delivery_fee,
    )


async def list_orders_service(
    username: str,
    repo: OrderRepository,
    log: Log,
    transfer_status: str | None = None,
    archive: str | None = None,
    limit: str | None = None,
    page: str | None = None,
) -> OrderPage:
    """
    Страница заказов пользователя.
    Неверный archive → InvalidArchiveFilter, остальные параметры подставляются по умолчанию.
    """
    archive_flag = parse_archive_flag(archive)
    user = await resolve_owner(username, repo, log)

    status = transfer_status_filter(transfer_status)
    per_page = parse_positive_int(limit, DEFAULT_LIMIT)
    current_page = parse_positive_int(page, DEFAULT_PAGE)

    orders, total = await repo.list_orders(status, archive_flag, per_page, current_page, user.id)

    await log.log_info("order", f"{len(orders)} заказов загружено", {
        "user_id": user.id, "status": status, "archive": archive_flag, "page": current_page,
    })
    return OrderPage(
        data=orders,
        total=total,
        current_page=current_page,
        per_page=per_page,
        total_in_page=len(orders),
        last_page=last_page_for(total, per_page),
    )


async def cancel_order_service(consignment_id: int, repo: OrderRepository, log: Log) -> None:
    """
    Отмена заказа. OrderNotCancellable пробрасывается наверх после записи в лог.
    """
    try:
        await repo.cancel_order(consignment_id)
    except OrderNotCancellable as e:
        await log.log_warning("order", f"Заказ не отменён: {e}", {"consignment_id": consignment_id})
        raise
    await log.log_info("order", "Заказ отменён", {"consignment_id": consignment_id})
