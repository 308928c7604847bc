import asyncio
import logging

from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError, SQLAlchemyError

from marketplace.infrastructure.database import SessionLocal
from marketplace.interfaces.results import RepositoryResult

logger = logging.getLogger(__name__)

# Postgres SQLSTATE codes, so callers see the same codes whatever the dialect
UNIQUE_VIOLATION = "23505"
INSUFFICIENT_PRIVILEGE = "42501"
UNDEFINED_TABLE = "42P01"


def error_code_for(exc: Exception) -> str | None:
    if isinstance(exc, IntegrityError):
        return UNIQUE_VIOLATION
    if isinstance(exc, (OperationalError, ProgrammingError)):
        return UNDEFINED_TABLE
    return None


class SqlAlchemyRepository:
    def __init__(self, session_factory=SessionLocal, change_feed=None):
        self._session_factory = session_factory
        self._change_feed = change_feed

    async def _run(self, operation, *args) -> RepositoryResult:
        """Run a blocking session operation in a worker thread and wrap its outcome."""
        return await asyncio.to_thread(self._execute, operation, *args)

    def _execute(self, operation, *args) -> RepositoryResult:
        session = self._session_factory()
        try:
            data = operation(session, *args)
            session.commit()
            return RepositoryResult.success(data)
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error in {operation.__name__}: {e}")
            session.rollback()
            return RepositoryResult.failure(str(e), code=error_code_for(e))
        finally:
            session.close()

    def _publish(self, event):
        if self._change_feed is not None:
            self._change_feed.publish(event)
