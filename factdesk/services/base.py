from typing import Callable, Optional
from datetime import datetime
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from factdesk.core.config import Settings, settings as default_settings
from factdesk.core.exceptions import FactDeskError, InternalError, ValidationError
from factdesk.core.timeutils import utcnow

logger = logging.getLogger(__name__)


class BaseService:
    """Shared plumbing for services that work on one database session."""

    def __init__(
        self,
        db: Session,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            db: SQLAlchemy session owned by the caller (one per request).
            settings: Application settings; defaults to the process settings.
            clock: Source of "now", injectable for tests.
        """
        self.db = db
        self.settings = settings or default_settings
        self.clock = clock or utcnow

    def _page_bounds(self, page: int, limit: Optional[int]) -> tuple:
        limit = self.settings.DEFAULT_PAGE_SIZE if limit is None else limit
        if page < 1:
            raise ValidationError("page must be >= 1")
        if limit < 1 or limit > self.settings.MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {self.settings.MAX_PAGE_SIZE}")
        return page, limit

    def _commit(self, context: str, on_conflict: Optional[FactDeskError] = None) -> None:
        """
        Commit the unit of work or roll all of it back.

        A lost optimistic-lock race or unique-constraint violation raises
        ``on_conflict`` when given. Any other database failure is logged and
        reported as an opaque InternalError.
        """
        try:
            self.db.commit()
        except (StaleDataError, IntegrityError) as e:
            self.db.rollback()
            if on_conflict is None:
                logger.error(f"Integrity failure while {context}: {str(e)}", exc_info=True)
                raise InternalError() from e
            logger.warning(f"Concurrent write rejected while {context}: {str(e)}")
            raise on_conflict from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error while {context}: {str(e)}", exc_info=True)
            raise InternalError() from e
