import logging

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

log = logging.getLogger("storefront.db")


def normalized_database_url(raw_url: str) -> str:
    """
    DATABASE_URL normalisation:
    - postgres:// or postgresql:// without a driver is routed to psycopg3.
    - Anything else (SQLite etc.) is returned unchanged.
    """
    if not raw_url:
        return "sqlite:///./storefront.db"
    raw_url = raw_url.strip()
    if raw_url.startswith("postgres://"):
        return "postgresql+psycopg://" + raw_url[len("postgres://") :]
    if raw_url.startswith("postgresql://") and "+psycopg" not in raw_url.split("://", 1)[0]:
        return "postgresql+psycopg://" + raw_url[len("postgresql://") :]
    return raw_url


def build_engine(raw_url: str) -> Engine:
    url = normalized_database_url(raw_url)
    # In-memory SQLite: one shared connection so tables created at startup are visible to every request
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    use_static_pool = url.startswith("sqlite") and ":memory:" in url
    return create_engine(
        url,
        connect_args=connect_args,
        poolclass=StaticPool if use_static_pool else None,
    )


def get_db(request: Request):
    with Session(request.app.state.engine) as session:
        yield session


def init_db(engine: Engine) -> None:
    # Registers every table on SQLModel.metadata
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def ping_db(engine: Engine) -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        log.warning("Database ping failed: %s", e)
        return False
