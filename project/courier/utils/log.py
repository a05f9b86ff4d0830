# courier/utils/log.py
# Логирование событий сервиса заказов

import os
import datetime
import logging
from aiologger import Logger
from aiologger.handlers.files import AsyncFileHandler


class Log:
    def __init__(self, log_dir: str = "log", log_print: bool = False):
        self.log_dir = log_dir
        os.makedirs(self.log_dir, exist_ok=True)
        self.handlers = {}
        self.log_print = log_print

    def build_log_path(self, target: str, now: datetime.datetime) -> str:
        """
        Путь к лог-файлу цели:
        log/2025/10/04-order.log
        """
        base_dir = os.path.join(self.log_dir, f"{now.year}", f"{now:%m}")
        os.makedirs(base_dir, exist_ok=True)

        filename = f"{now:%d}-{target or 'app'}.log"
        return os.path.join(base_dir, filename)

    def format_line(self, target: str, message: str, data: dict | None, now: datetime.datetime) -> str:
        line = f"{now:%d.%m.%Y %H:%M:%S} {target}: {message}"
        if data:
            line += f": {self.safe_serialize(data)}"
        return line

    async def get_logger(self, target: str, now: datetime.datetime) -> Logger:
        """Асинхронный логгер для target, пересоздаётся при смене дня."""
        log_path = self.build_log_path(target, now)

        current = self.handlers.get(target)
        if current is None or current["path"] != log_path:
            handler = AsyncFileHandler(filename=log_path, mode="a", encoding="utf-8")
            target_logger = Logger(name=f"courier_{target}")
            target_logger.add_handler(handler)

            if current is not None:
                await current["logger"].shutdown()

            self.handlers[target] = {"path": log_path, "logger": target_logger}

        return self.handlers[target]["logger"]

    # ────────────── Асинхронное ──────────────
    async def log_info(
        self,
        target: str = "",
        message: str = "",
        data: dict | None = None,
        is_console: bool | None = None,
    ):
        now = datetime.datetime.now()
        line = self.format_line(target, message, data, now)

        target_logger = await self.get_logger(target, now)
        await target_logger.info(line)

        should_print = self.log_print if is_console is None else is_console
        if should_print:
            print(line)

    async def log_warning(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool | None = None):
        await self.log_info(target, f"WARNING: {message}", data, is_console)

    async def log_error(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = True):
        await self.log_info(target, f"ERROR: {message}", data, is_console)

    # ────────────── Синхронное (до старта event loop) ──────────────
    def log_info_sync(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool | None = None):
        now = datetime.datetime.now()
        log_path = self.build_log_path(target, now)
        line = self.format_line(target, message, data, now)

        logger = logging.getLogger(f"courier_sync_{target}")
        logger.setLevel(logging.INFO)
        logger.propagate = False

        # при смене дня или каталога логов подменяем файловый хендлер
        stale = [h for h in logger.handlers
                 if isinstance(h, logging.FileHandler) and h.baseFilename != os.path.abspath(log_path)]
        for h in stale:
            logger.removeHandler(h)
            h.close()

        if not logger.handlers:
            handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            handler.setFormatter(logging.Formatter("%(message)s"))
            logger.addHandler(handler)

        logger.info(line)

        should_print = self.log_print if is_console is None else is_console
        if should_print:
            print(line)

    def log_error_sync(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool | None = None):
        self.log_info_sync(target, f"ERROR: {message}", data, is_console)

    def safe_serialize(self, obj):
        """
        Приводим объект к виду, пригодному для записи в лог:
        - dict, list, tuple рекурсивно
        - Pydantic модели через model_dump
        - ORM объекты по публичным атрибутам
        - всё остальное → строка с типом
        """
        if obj is None:
            return None
        elif isinstance(obj, (str, int, float, bool)):
            return obj
        elif isinstance(obj, dict):
            return {k: self.safe_serialize(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple, set)):
            return [self.safe_serialize(v) for v in obj]
        elif hasattr(obj, "model_dump"):
            return self.safe_serialize(obj.model_dump())
        elif hasattr(obj, "__dict__"):
            return {k: self.safe_serialize(v) for k, v in vars(obj).items() if not k.startswith("_")}
        else:
            return f"<{type(obj).__name__}>"

    async def shutdown(self):
        for h in list(self.handlers.values()):
            await h["logger"].shutdown()
        self.handlers.clear()
