# courier/models/order.py

from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, false
from sqlalchemy.sql import func
from courier.utils.database import Base

ORDER_STATUS_PENDING = "Pending"
ORDER_STATUS_CANCELLED = "Cancelled"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)     # consignment id, автоинкремент

    user_id  = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    store_id = Column(Integer, nullable=False)              # внешняя ссылка на магазин
    merchant_order_id = Column(String, nullable=False, default="")

    # Получатель
    recipient_name    = Column(String, nullable=False)
    recipient_phone   = Column(String, nullable=False)
    recipient_address = Column(Text, nullable=False)
    recipient_city    = Column(Integer, nullable=False, default=0)
    recipient_zone    = Column(Integer, nullable=False, default=0)
    recipient_area    = Column(Integer, nullable=False, default=0)

    # Отправление
    delivery_type       = Column(Integer, nullable=False)
    item_type           = Column(Integer, nullable=False)
    special_instruction = Column(Text, nullable=False, default="")
    item_quantity       = Column(Integer, nullable=False)
    item_weight         = Column(Float, nullable=False)
    amount_to_collect   = Column(Float, nullable=False)
    item_description    = Column(Text, nullable=False, default="")
    order_type_id       = Column(Integer, nullable=False, default=1)

    # Финансы: считаются один раз при создании
    total_fee      = Column(Float, nullable=False)
    cod_fee        = Column(Float, nullable=False)
    promo_discount = Column(Float, nullable=False, default=0.0)
    discount       = Column(Float, nullable=False, default=0.0)
    delivery_fee   = Column(Float, nullable=False)

    archive      = Column(Boolean, nullable=False, default=False, server_default=false())
    order_status = Column(String, nullable=False, default=ORDER_STATUS_PENDING, server_default=ORDER_STATUS_PENDING)
    created_at   = Column(DateTime(timezone=True), server_default=func.now())
