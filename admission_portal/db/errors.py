"""
Classify SQLAlchemy failures into service errors at the component boundary.

Connection-level problems become TransientStoreError so the caller can tell
"check your connection" apart from everything else.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError

from admission_portal.core.exceptions import ServiceError, TransientStoreError

logger = logging.getLogger(__name__)


def is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    return isinstance(exc, DBAPIError) and bool(exc.connection_invalidated)


def classify_store_error(exc: SQLAlchemyError, action: str) -> ServiceError:
    if is_transient(exc):
        return TransientStoreError()
    return ServiceError(f"Failed to {action}. Reason: {exc.__class__.__name__}")


@contextmanager
def translate_store_errors(action: str) -> Iterator[None]:
    """
    Wrap store calls; re-raise SQLAlchemy errors as ServiceError subclasses.
    `action` reads as a verb phrase, e.g. "save admission data".
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Store error while trying to %s", action, exc_info=True)
        raise classify_store_error(e, action) from e
