from typing import Iterator
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Create Base class for models
Base = declarative_base()


class Database:
    """
    Owns the SQLAlchemy engine and session factory.

    Constructed once in the application lifespan and stored on
    ``app.state.database``; disposed on shutdown.
    """

    def __init__(self, url: str, pool_size: int = 10, max_overflow: int = 20):
        self.url = url
        self.engine: Engine = self._create_engine(url, pool_size, max_overflow)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @staticmethod
    def _create_engine(url: str, pool_size: int, max_overflow: int) -> Engine:
        if url.startswith("sqlite"):
            # SQLite (tests, local runs) has no server-side pool to size
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )

        return create_engine(
            url,
            pool_pre_ping=True,  # Verify connections before using them
            pool_size=pool_size,
            max_overflow=max_overflow
        )

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        """Create tables directly. Production schemas go through Alembic instead."""
        from app.models import user, department, evaluation  # noqa: F401 - register models
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
