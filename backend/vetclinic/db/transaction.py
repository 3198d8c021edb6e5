"""Module: transaction."""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vetclinic.core.errors import ServerError

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(db: Session, failure_message: str) -> Iterator[Session]:
    """
    Run a block of writes as one transaction.

    Commits when the block exits cleanly and rolls back on any exception.
    Database errors are logged and re-raised as ``ServerError(failure_message)``;
    domain errors raised inside the block propagate unchanged after rollback.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(failure_message)
        raise ServerError(failure_message, original_error=e) from e
    except Exception:
        db.rollback()
        raise


@contextmanager
def read_guard(failure_message: str) -> Iterator[None]:
    """Map database errors raised by read-only queries to ``ServerError``."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception(failure_message)
        raise ServerError(failure_message, original_error=e) from e
