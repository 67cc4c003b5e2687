from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine, async_sessionmaker
from sleep_tracker.core.config import settings
from sleep_tracker.core.logger import get_logger

logger = get_logger("database")


def build_engine(database_url: str) -> AsyncEngine:
    """Create the async engine, with pool tuning only for PostgreSQL."""
    if not database_url.startswith("postgresql"):
        logger.info("Using non-PostgreSQL database engine without pool tuning")
        return create_async_engine(database_url, echo=False, future=True)

    ssl_config = {} if settings.IS_DEVELOPMENT else {"ssl": "require"}
    return create_async_engine(
        database_url,
        echo=False,
        connect_args={
            **ssl_config,
            "server_settings": {
                "application_name": "sleep_tracker",
                "jit": "off",
            },
            "command_timeout": 30,
        },
        # Connection pool configuration
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=1800,
        pool_pre_ping=True,
        future=True
    )


engine = build_engine(settings.DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db():
    """Dependency for getting database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
