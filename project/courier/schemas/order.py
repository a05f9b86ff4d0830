# courier/schemas/order.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# ────────────── Запрос на создание заказа ──────────────
# Отсутствующие поля приходят как 0 / "", обязательность проверяет validate_order.
# Типы строгие: "12" в числовом поле, true, NaN и Infinity отклоняются с 400
class OrderCreate(BaseModel):
    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    store_id: int = 0
    merchant_order_id: str = ""
    recipient_name: str = ""
    recipient_phone: str = ""
    recipient_address: str = ""
    recipient_city: int = 0
    recipient_zone: int = 0
    recipient_area: int = 0
    delivery_type: int = 0
    item_type: int = 0
    special_instruction: str = ""
    item_quantity: int = 0
    item_weight: float = 0
    amount_to_collect: float = 0
    item_description: str = ""


# ────────────── Ответ на создание ──────────────
class OrderCreated(BaseModel):
    consignment_id: int
    merchant_order_id: str
    order_status: str = "Pending"
    delivery_fee: float


# ────────────── Строка списка заказов ──────────────
class OrderSummary(BaseModel):
    order_consignment_id: str
    order_created_at: str
    order_description: str
    merchant_order_id: str
    recipient_name: str
    recipient_address: str
    recipient_phone: str
    order_amount: float
    delivery_fee: float
    cod_fee: float
    promo_discount: float
    discount: float
    order_status: str
    order_type: str
    item_type: str
    instruction: Optional[str] = None    # не выводится, если пусто
    total_fee: float


class OrderPage(BaseModel):
    data: list[OrderSummary] = Field(default_factory=list)
    total: int
    current_page: int
    per_page: int
    total_in_page: int
    last_page: int
