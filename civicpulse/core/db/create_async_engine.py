# Third-party imports
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

# Local application imports
from civicpulse.settings import settings

DATABASE_URL = settings.SQLALCHEMY_ASYNC_DATABASE_URI
IS_SQLITE = DATABASE_URL.startswith("sqlite")

# Asynchronous Engine
if IS_SQLITE:
    # aiosqlite connections are bound to the loop that opened them
    async_engine = create_async_engine(DATABASE_URL, echo=False, future=True, poolclass=NullPool)

    @event.listens_for(async_engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

else:
    async_engine = create_async_engine(
        DATABASE_URL,
        echo=settings.DEBUG_MODE,
        future=True,
        pool_pre_ping=True,
    )
