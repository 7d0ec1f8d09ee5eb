"""Permission catalog backed by the ``permissions`` table."""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.core.permissions.models import Permission


logger = structlog.get_logger()


class PermissionCatalog:
    """Read-only view of the permission names currently defined."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_names(self) -> list[str]:
        """Return every distinct permission name.

        An empty list is a valid answer. If the store cannot be reached or
        the table has not been migrated yet, this also returns an empty
        list so callers see a world with no permissions rather than a crash.

        Returns:
            Permission names in alphabetical order
        """
        stmt = select(Permission.name).distinct().order_by(Permission.name)
        try:
            # A savepoint keeps a failed read from aborting the caller's transaction
            async with self.session.begin_nested():
                result = await self.session.execute(stmt)
        except (DBAPIError, OSError) as e:
            logger.warning(
                "authorization_catalog_unavailable",
                error_type=type(e).__name__,
                error=str(e),
            )
            return []
        return list(result.scalars().all())
