"""
Database configuration and session management.
Uses SQLAlchemy 2.0 patterns.

The engine and session factory are built once by the application factory
from the injected Settings and stored on ``app.state``.
"""

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from food_shared.config.settings import Settings
from food_shared.utils.exceptions import (
    ConcurrentModificationError,
    ConflictError,
    DatabaseError,
)


def build_engine(settings: Settings) -> Engine:
    """Create the engine for ``settings.database_url``."""
    if settings.is_sqlite:
        engine = create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            echo=settings.database_echo,
        )

        @event.listens_for(engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        settings.database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=15,
        pool_timeout=30,
        pool_recycle=1800,
        echo=settings.database_echo,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            ...

    The session is automatically closed after the request completes.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session, operation: str = "transacción") -> Iterator[Session]:
    """
    Run the enclosed block as one transaction.

    Commits when the block completes, rolls back on any exception and
    re-raises it. A lost optimistic-lock race (StaleDataError) surfaces as
    ConcurrentModificationError, a constraint violation as ConflictError
    and any other database failure as DatabaseError.

    Usage:
        with unit_of_work(self._db, "checkout"):
            self._db.add(order)
            self._cart_service.clear_items(cart)
    """
    try:
        yield db
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        raise ConcurrentModificationError(operation=operation) from exc
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(
            f"Conflicto de integridad durante {operation}",
            operation=operation,
            error=str(exc.orig),
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise DatabaseError(operation, error=str(exc)) from exc
    except Exception:
        db.rollback()
        raise
