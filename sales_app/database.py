from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def make_engine(database_url: str):
    if not database_url.startswith("sqlite"):
        return create_engine(database_url)

    # SQLite connections are handed across the threadpool workers
    engine = create_engine(database_url, connect_args={"check_same_thread": False})

    # SQLite's built-in lower() only folds ASCII letters
    @event.listens_for(engine, "connect")
    def register_unicode_lower(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

    return engine


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
