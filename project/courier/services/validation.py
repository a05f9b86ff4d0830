# courier/services/validation.py

import re
from enum import Enum
from typing import Iterator

from courier.schemas.order import OrderCreate

# Мобильный номер Бангладеш: 01, затем 3-9, затем ещё 8 цифр
PHONE_PATTERN = re.compile(r"^01[3-9][0-9]{8}$")


class OrderField(str, Enum):
    STORE_ID = "store_id"
    RECIPIENT_NAME = "recipient_name"
    RECIPIENT_PHONE = "recipient_phone"
    RECIPIENT_ADDRESS = "recipient_address"
    DELIVERY_TYPE = "delivery_type"
    AMOUNT_TO_COLLECT = "amount_to_collect"
    ITEM_QUANTITY = "item_quantity"
    ITEM_WEIGHT = "item_weight"
    ITEM_TYPE = "item_type"


class ValidationErrors:
    """Упорядоченный список пар (поле, сообщение)."""

    def __init__(self):
        self._items: list[tuple[OrderField, str]] = []

    def add(self, field: OrderField, message: str) -> None:
        self._items.append((field, message))

    def fields(self) -> set[OrderField]:
        return {field for field, _ in self._items}

    def as_dict(self) -> dict[str, list[str]]:
        result: dict[str, list[str]] = {}
        for field, message in self._items:
            result.setdefault(field.value, []).append(message)
        return result

    def __iter__(self) -> Iterator[tuple[OrderField, str]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


def is_valid_phone(phone: str) -> bool:
    return PHONE_PATTERN.fullmatch(phone) is not None


def validate_order(order: OrderCreate) -> ValidationErrors:
    """
    Проверяет все поля заказа сразу и собирает все ошибки,
    чтобы клиент получил их одним ответом.
    """
    errors = ValidationErrors()

    if order.store_id == 0:
        errors.add(OrderField.STORE_ID, "The store field is required")
    if order.recipient_name == "":
        errors.add(OrderField.RECIPIENT_NAME, "The recipient name field is required")
    if not is_valid_phone(order.recipient_phone):
        errors.add(OrderField.RECIPIENT_PHONE, "Invalid phone number")
    if order.recipient_address == "":
        errors.add(OrderField.RECIPIENT_ADDRESS, "The recipient address field is required")
    if order.delivery_type == 0:
        errors.add(OrderField.DELIVERY_TYPE, "The delivery type field is required")
    if order.amount_to_collect == 0:
        errors.add(OrderField.AMOUNT_TO_COLLECT, "The amount to collect field is required")
    if order.item_quantity == 0:
        errors.add(OrderField.ITEM_QUANTITY, "The item quantity field is required")
    if order.item_weight == 0:
        errors.add(OrderField.ITEM_WEIGHT, "The item weight field is required")
    if order.item_type == 0:
        errors.add(OrderField.ITEM_TYPE, "The item type field is required")

    return errors
