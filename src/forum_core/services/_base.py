"""Transaction scaffolding shared by the store-backed services."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from forum_core.core.errors import ConflictError, ForumError, StoreError

logger = logging.getLogger(__name__)


class StoreService:
    """Base for services that own a session factory.

    Each public operation runs in its own short-lived session and
    transaction; nothing is cached between calls.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """Yield a session inside a transaction, committing on success.

        Core errors propagate unchanged. Unique-constraint violations surface
        as ConflictError, any other driver failure as StoreError.
        """
        with self._session_factory() as db:
            try:
                with db.begin():
                    yield db
            except ForumError:
                raise
            except IntegrityError as err:
                raise ConflictError("Conflicting record already exists") from err
            except SQLAlchemyError as err:
                logger.exception("Store statement failed")
                raise StoreError("Store operation failed") from err
