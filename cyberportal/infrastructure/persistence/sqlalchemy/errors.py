import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from ....exceptions import ConflictError, StoreError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(session: Session, action: str, conflict_message: str = "Resource already exists") -> Iterator[None]:
    """Roll back and translate driver errors into the application's error types."""
    try:
        yield
    except IntegrityError as e:
        session.rollback()
        logger.info(f"Integrity violation during {action}: {e.orig}")
        raise ConflictError(conflict_message) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Database error during {action}: {e}")
        raise StoreError() from e
