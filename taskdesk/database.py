"""Database engine and session dependency using SQLModel."""

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from taskdesk import models, settings  # noqa: F401

_connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)
engine = create_engine(settings.DATABASE_URL, echo=False, connect_args=_connect_args)


def create_db_and_tables(bind: Engine = engine) -> None:
    """Create any missing tables from SQLModel metadata. Existing tables are left as they are."""
    SQLModel.metadata.create_all(bind)


def get_session():
    """Yield a database session for FastAPI dependency injection."""
    with Session(engine) as session:
        yield session
