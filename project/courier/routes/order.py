# courier/routes/order.py

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from courier.exceptions import InvalidArchiveFilter, InvalidOrder, OrderNotCancellable, UserNotFound
from courier.repositories import OrderRepository
from courier.routes.auth import get_current_username, unauthorized
from courier.routes.deps import get_log, get_order_repository
from courier.schemas.order import OrderCreate
from courier.services.order import (
    cancel_order_service,
    create_order_service,
    list_orders_service,
    parse_consignment_id,
)
from courier.utils.log import Log
from courier.utils.responses import envelope, error_response, internal_error

router = APIRouter()

# ────────────── CREATE ──────────────
@router.post(
    "",
    status_code=status.HTTP_200_OK,
    summary="Создать заказ",
    response_description="Возвращает consignment id и стоимость доставки",
    responses={
        200: {"description": "Заказ успешно создан"},
        400: {"description": "Некорректное тело запроса"},
        401: {"description": "Некорректный пользователь или токен"},
        422: {"description": "Ошибки в полях заказа"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def create_order(
    order: OrderCreate,
    username: str = Depends(get_current_username),
    repo: OrderRepository = Depends(get_order_repository),
    log: Log = Depends(get_log),
):
    try:
        created = await create_order_service(order, username, repo, log)
    except UserNotFound:
        raise unauthorized()
    except InvalidOrder as e:
        return error_response("Please fix the given errors", 422, errors=e.errors.as_dict())
    except SQLAlchemyError as e:
        await log.log_error("order", f"Ошибка при создании заказа: {e}", {"username": username})
        return internal_error()

    return envelope("Order Created Successfully", data=created.model_dump())


# ────────────── READ ALL ──────────────
@router.get(
    "/all",
    status_code=status.HTTP_200_OK,
    summary="Список заказов пользователя",
    response_description="Страница заказов с пагинацией",
    responses={
        200: {"description": "Список заказов успешно получен"},
        400: {"description": "Некорректный фильтр archive"},
        401: {"description": "Некорректный пользователь или токен"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def list_orders(
    transfer_status: Optional[str] = None,
    archive: Optional[str] = None,
    limit: Optional[str] = None,
    page: Optional[str] = None,
    username: str = Depends(get_current_username),
    repo: OrderRepository = Depends(get_order_repository),
    log: Log = Depends(get_log),
):
    try:
        result = await list_orders_service(
            username, repo, log,
            transfer_status=transfer_status, archive=archive, limit=limit, page=page,
        )
    except InvalidArchiveFilter:
        return error_response("Invalid archive filter", 400)
    except UserNotFound:
        raise unauthorized()
    except SQLAlchemyError as e:
        await log.log_error("order", f"Ошибка при получении списка заказов: {e}", {"username": username})
        return internal_error()

    return envelope(
        "Orders successfully fetched.",
        data=result.model_dump(mode="json", exclude={"data"}) | {
            "data": [o.model_dump(mode="json", exclude_none=True) for o in result.data],
        },
    )


# ────────────── CANCEL ──────────────
@router.put(
    "/{consignment_id}/cancel",
    status_code=status.HTTP_200_OK,
    summary="Отменить заказ",
    responses={
        200: {"description": "Заказ отменён"},
        400: {"description": "Неверный consignment id, заказ уже отменён или не найден"},
        401: {"description": "Некорректный пользователь или токен"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def cancel_order(
    consignment_id: str,
    username: str = Depends(get_current_username),
    repo: OrderRepository = Depends(get_order_repository),
    log: Log = Depends(get_log),
):
    try:
        order_id = parse_consignment_id(consignment_id)
    except ValueError:
        return error_response("Invalid consignment ID", 400)

    try:
        await cancel_order_service(order_id, repo, log)
    except OrderNotCancellable:
        return error_response("Please contact cx to cancel order", 400)
    except SQLAlchemyError as e:
        await log.log_error("order", f"Ошибка при отмене заказа: {e}", {"consignment_id": order_id})
        return internal_error()

    return envelope("Order Cancelled Successfully")
