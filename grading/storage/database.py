"""Database - Engine e sessoes assincronas do SQLAlchemy."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.logger import get_logger

from .models import Base

logger = get_logger("database")


class Database:
    """Wrapper sobre o engine assincrono.

    Example:
        >>> db = Database("sqlite+aiosqlite:///./examforge.db")
        >>> await db.init_models()
        >>> async with db.session() as session:
        ...     store = QuizStore(session)
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_async_engine(url, echo=echo)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def init_models(self) -> None:
        """Cria as tabelas que ainda nao existem."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Tabelas verificadas", database_url=self.url.split("://", 1)[0])

    async def dispose(self) -> None:
        await self.engine.dispose()

    def session(self) -> AsyncSession:
        return self.session_factory()
