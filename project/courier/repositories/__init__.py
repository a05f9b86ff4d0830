# courier/repositories/__init__.py

from courier.repositories.base import OrderRepository, to_summary
from courier.repositories.memory import InMemoryOrderRepository
from courier.repositories.sql import SQLOrderRepository

__all__ = ["OrderRepository", "SQLOrderRepository", "InMemoryOrderRepository", "to_summary"]
