"""Engine and session factory.

PostgreSQL sessions run in UTC. SQLite (tests, local demos) is allowed to
share connections across the threads FastAPI runs sync endpoints on.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


def _connect_args(database_url: str) -> dict:
    backend = make_url(database_url).get_backend_name()
    if backend == "postgresql":
        return {"options": "-c timezone=utc"}
    if backend == "sqlite":
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
