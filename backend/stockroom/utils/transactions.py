import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stockroom.errors import StorageUnavailable

log = logging.getLogger(__name__)


@contextmanager
def smart_transaction(session: Session) -> Iterator:
    """
    Begin a transaction on the given Session, or a SAVEPOINT if one is
    already active. Commits on clean exit, rolls back on any exception
    (domain errors included), then re-raises.

    Usage:
        with smart_transaction(session):
            ... DB work ...
    """
    if session.in_transaction():
        cm = session.begin_nested()
    else:
        cm = session.begin()
    with cm:
        yield


@contextmanager
def storage_errors(operation: str, identifier: Optional[str] = None) -> Iterator:
    """
    Re-raise low-level SQLAlchemy failures as StorageUnavailable naming the
    repository call and the record it was working on. Anything else passes
    through untouched.
    """
    try:
        yield
    except SQLAlchemyError as e:
        log.error("%s failed for %s: %s", operation, identifier, e)
        raise StorageUnavailable(operation, identifier) from e
