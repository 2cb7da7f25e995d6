"""
Persistent reads and the single write done during session resolution.
"""

from enum import Enum
from typing import Optional, Tuple
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from analytics_app.models.session import VisitorSession
from analytics_app.models.website import Website
from analytics_app.schemas.session import SessionData

logger = logging.getLogger(__name__)


class CreateSessionResult(Enum):
    """Outcome of an insert attempt"""
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


class SessionStore:
    """
    Database access for websites and sessions.

    Note: Async for interface consistency with the cache, DB queries are sync.
    """

    def __init__(self, db: Session):
        self.db = db

    async def get_website(self, website_id: str) -> Optional[Website]:
        """Website by id, including soft-deleted ones"""
        return self.db.get(Website, website_id)

    async def get_session(self, session_id: str) -> Optional[VisitorSession]:
        return self.db.get(VisitorSession, session_id)

    async def create_session(
        self,
        data: SessionData
    ) -> Tuple[CreateSessionResult, VisitorSession]:
        """
        Insert a session row.

        The id is derived from the visitor, so two requests from the same
        visitor can try to insert the same row at the same time. The primary
        key lets exactly one of them win; the loser gets ALREADY_EXISTS and
        the winner's row.

        Raises:
            IntegrityError: the insert failed for any reason other than an
                existing row with the same id
        """
        session = VisitorSession(**data.model_dump())
        self.db.add(session)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.db.get(VisitorSession, data.id)
            if existing is None:
                raise
            logger.debug("Session %s created concurrently, using existing row", data.id)
            return CreateSessionResult.ALREADY_EXISTS, existing

        self.db.refresh(session)
        return CreateSessionResult.CREATED, session
