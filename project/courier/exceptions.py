# courier/exceptions.py

"""
Доменные исключения сервиса заказов.
Поднимаются репозиторием и сервисами, в HTTP ответы их переводят роуты.
"""


class OrderNotCancellable(Exception):
    """Заказ уже отменён или не существует."""

    def __init__(self, consignment_id: int):
        self.consignment_id = consignment_id
        super().__init__("order already cancelled or not found")


class UserNotFound(Exception):
    """Токен валиден, но пользователя с таким username нет."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"user '{username}' not found")


class InvalidOrder(Exception):
    """Запрос на создание заказа не прошёл проверку полей."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__(f"{len(errors)} invalid field(s)")


class InvalidArchiveFilter(ValueError):
    """Значение archive не является boolean литералом PostgreSQL."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"invalid archive filter: {raw!r}")
