"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db(). Every ledger operation runs inside transaction().
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase

from back_office.config import get_settings
from back_office.errors import ConflictError, PersistenceError

settings = get_settings()
logger = logging.getLogger("back_office.db")

# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# which handles cases where the database restarted or a
# connection went stale.
connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)

# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved. Every stock and due adjustment must land together
# with the record that caused it, or not at all.
# autoflush=False means SQLAlchemy won't send SQL to the
# database until we explicitly flush or commit.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a block as one all-or-nothing unit of work.

    Commits when the block finishes. Any exception rolls back
    everything the block wrote, including aggregate updates
    issued as bulk UPDATE statements. A constraint violation
    (two writers claiming the same bill number) is re-raised as
    ConflictError so the caller can retry; any other store
    failure becomes PersistenceError.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Transaction rolled back on a conflicting write: %s", e.orig)
        raise ConflictError(str(e.orig)) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Transaction rolled back by the store: %s", e)
        raise PersistenceError(str(getattr(e, "orig", None) or e)) from e
    except Exception as e:
        db.rollback()
        logger.warning("Transaction rolled back: %s", e)
        raise
