# courier/services/fees.py

import math
from typing import NamedTuple

# Код города с льготным тарифом
PREFERRED_CITY = 1
COD_RATE = 0.01


class Fees(NamedTuple):
    delivery_fee: float
    cod_fee: float
    total_fee: float


def delivery_fee_for(recipient_city: int, item_weight: float) -> float:
    """
    Стоимость доставки по городу и весу (кг).

    Город 1: до 0.5 кг → 60, до 1 кг → 70, дальше +15 за каждый начатый килограмм.
    Остальные города: 100 + 15 * ceil(вес - 1), без нижней границы по весу.
    """
    if recipient_city == PREFERRED_CITY:
        if item_weight <= 0.5:
            return 60.0
        if item_weight <= 1:
            return 70.0
        return 70 + 15 * math.ceil(item_weight - 1)
    return 100 + 15 * math.ceil(item_weight - 1)


def calculate_fees(recipient_city: int, item_weight: float, amount_to_collect: float) -> Fees:
    """Доставка, COD (1% от суммы к получению) и итоговая сумма заказа."""
    delivery_fee = float(delivery_fee_for(recipient_city, item_weight))
    cod_fee = amount_to_collect * COD_RATE
    total_fee = amount_to_collect + cod_fee + delivery_fee
    return Fees(delivery_fee=delivery_fee, cod_fee=cod_fee, total_fee=total_fee)
