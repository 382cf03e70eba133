from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.settings import settings


def build_engine(url: str, **kwargs) -> Engine:
    is_sqlite = url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}
    eng = create_engine(url, connect_args=connect_args, pool_pre_ping=True, **kwargs)

    # Ensure SQLite enforces foreign keys (needed for ondelete=RESTRICT/CASCADE).
    if is_sqlite:

        @event.listens_for(eng, "connect")
        def _set_sqlite_pragma(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return eng


engine = build_engine(settings.DATABASE_URL)

# One session per request; score writes rely on nothing being committed until commit().
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
