# courier/middleware/db_middleware.py

from starlette.types import ASGIApp, Receive, Scope, Send
from courier.utils.database import AsyncSessionLocal


class DBSessionMiddleware:
    """Открывает AsyncSession на каждый HTTP запрос и кладёт её в request.state.db."""

    def __init__(self, app: ASGIApp, session_factory=AsyncSessionLocal):
        self.app = app
        self.session_factory = session_factory

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        session = self.session_factory()
        state["db"] = session
        try:
            await self.app(scope, receive, send)
        finally:
            # закрываем сессию только после завершения запроса
            await session.close()
