from contextlib import contextmanager
import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront.config import get_settings
from storefront.exceptions import ConflictError, StorefrontError, TransactionError

logger = logging.getLogger(__name__)

settings = get_settings()


def build_engine(database_url: str):
    """
    Create a SQLAlchemy engine.

    Server databases get a connection pool; SQLite gets the connect args it
    needs to be shared across FastAPI's worker threads.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


engine = build_engine(settings.DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency to get database session.
    Yields a database session and closes it after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Unit of work over a session.

    Everything executed inside the block is committed once on exit, or rolled
    back as a whole if anything raises. Store failures are translated into
    domain errors:

    - IntegrityError -> ConflictError
    - any other SQLAlchemyError -> TransactionError

    Domain errors raised inside the block propagate unchanged after rollback.
    """
    try:
        yield db
        db.commit()
    except StorefrontError:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error, transaction rolled back: {e.orig}")
        raise ConflictError(f"Constraint violation: {e.orig}") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction failed and was rolled back: {e}")
        raise TransactionError(f"Storage failure: {e}") from e
    except Exception:
        db.rollback()
        raise
