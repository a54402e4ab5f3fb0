"""Error taxonomy shared by the services and the HTTP layer.

Every error carries the HTTP status the API surface answers with; the
message is what ends up in the ``{"error": ...}`` body.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session


class GamePulseError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message: str = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(GamePulseError):
    """Raised when a required field is missing or malformed."""

    status_code = 400
    default_message = 'Invalid input'


class Conflict(GamePulseError):
    """Raised when a uniqueness rule would be violated."""

    status_code = 400
    default_message = 'Resource already exists'


class Unauthenticated(GamePulseError):
    """Raised for bad credentials.  Never says which half was wrong."""

    status_code = 401
    default_message = 'Invalid credentials'


class NotFound(GamePulseError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    default_message = 'Not found'


class StoreError(GamePulseError):
    """Raised when the relational store fails.  Details go to the log only."""

    status_code = 500
    default_message = 'Internal server error'


@contextmanager
def store_errors(db: Session, action: str, logger: logging.Logger) -> Iterator[None]:
    """Roll back *db* and raise :class:`StoreError` on any SQLAlchemy failure.

    Args:
        db:     Session used inside the block.
        action: Short description used in the log line.
        logger: Logger that receives the underlying error.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Store failure while %s: %s", action, exc)
        raise StoreError() from exc
