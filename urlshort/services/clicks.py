"""Background click tracking.

Redirects must not wait on the statistics update, so each access is
recorded by a detached asyncio task with its own database session.
Delivery is best-effort and at-most-once: a failed update is logged
and dropped.
"""

import asyncio
import logging
from typing import Optional, Set

from sqlalchemy.ext.asyncio import async_sessionmaker

from urlshort.repositories.url_repository import URLRepository

logger = logging.getLogger(__name__)


class ClickTracker:
    """
    Applies click-count / last-accessed updates outside the request.

    Tasks share only the session factory (and therefore the connection pool)
    with request handlers.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        url_repository: Optional[URLRepository] = None,
    ):
        """
        Args:
            session_factory: Factory producing sessions for the update tasks
            url_repository: Repository used to apply the update
        """
        self.session_factory = session_factory
        self.url_repository = url_repository or URLRepository()
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of updates scheduled but not yet finished."""
        return len(self._tasks)

    def schedule(self, url_id: int) -> None:
        """Record an access for url_id in the background and return immediately."""
        task = asyncio.create_task(self._record_access(url_id), name=f"record-access-{url_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _record_access(self, url_id: int) -> None:
        try:
            async with self.session_factory() as db:
                updated = await self.url_repository.record_access(db, url_id)
                await db.commit()
            if not updated:
                logger.debug(f"URL {url_id} vanished before its click was recorded")
        except Exception as e:
            logger.warning(f"Failed to update click count for URL {url_id}: {e}")

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for outstanding updates; anything still running after timeout is cancelled."""
        if not self._tasks:
            return

        _, not_done = await asyncio.wait(set(self._tasks), timeout=timeout)
        if not not_done:
            return

        for task in not_done:
            task.cancel()
        await asyncio.gather(*not_done, return_exceptions=True)
        logger.warning(f"Cancelled {len(not_done)} click updates still pending at shutdown")
