"""Shared error handling for repositories."""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import DataServiceException

logger = logging.getLogger(__name__)


@contextmanager
def data_service_call(db: Session, operation: str) -> Iterator[None]:
    """
    Run repository work and translate store failures.

    Any SQLAlchemyError rolls the session back and is re-raised as
    DataServiceException. The caller never sees an empty result in place
    of a failed query.

    Usage:
        with data_service_call(self.db, "load owner"):
            return self.db.query(...).first()
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Data service failure during %s: %s", operation, exc)
        db.rollback()
        raise DataServiceException(f"Data service error during {operation}") from exc
