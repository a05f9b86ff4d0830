# courier/utils/database.py

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool
from sqlalchemy.future import select
from courier.config import settings
from courier.utils.security import hash_password

# ────────────── Base для моделей ──────────────
Base = declarative_base()  # базовый класс для всех моделей SQLAlchemy

# ────────────── URL базы данных ──────────────
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# ────────────── Асинхронный движок ──────────────
# для SQLite соединения не переиспользуются между event loop'ами
engine_kwargs = {"poolclass": NullPool} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

engine = create_async_engine(
    SQLALCHEMY_DATABASE_URL,
    echo=False,  # True можно включить для отладки SQL
    **engine_kwargs,
)

# ────────────── Асинхронная сессия ──────────────
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)


def import_models():
    """Регистрирует таблицы в Base.metadata."""
    from courier.models import order, user  # noqa: F401


# ────────────── Инициализация базы данных ──────────────
async def init_db(login: str = settings.AUTH_LOGIN, password: str = settings.AUTH_PASSWORD):
    """
    Создаёт все таблицы в базе данных (если ещё не созданы)
    и заводит учётную запись мерчанта из настроек, если её ещё нет.
    Пароль хранится в виде хэша.
    """
    import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    from courier.models.user import User
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.username == login))
        if result.scalar_one_or_none() is None:
            session.add(User(username=login, password=hash_password(password)))
            await session.commit()


async def drop_db():
    """Удаляет все таблицы (используется тестами)."""
    import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
