from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from database.engine import Database


class BaseRepository:
    """
    Shared session handling for repositories.

    Every public method accepts an optional ``session``. When given, the call
    joins the caller's transaction and commits nothing itself; when omitted,
    the call runs in its own short transaction.
    """

    def __init__(self, db: Database):
        self.db = db

    @asynccontextmanager
    async def _session(self, session: Optional[AsyncSession]) -> AsyncIterator[AsyncSession]:
        if session is not None:
            yield session
            return
        async with self.db.transaction() as own_session:
            yield own_session
