"""Distribution data access repository."""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from depot.infrastructure.database.models.distribution import DistributionModel
from depot.infrastructure.database.repositories.base import BaseRepository


class DistributionRepository(BaseRepository[DistributionModel]):
    """Distribution data access only."""
    
    def __init__(self, session: AsyncSession):
        super().__init__(session, DistributionModel)
    
    async def find_by_path(self, path: str) -> Optional[DistributionModel]:
        """Find distribution by repository path."""
        stmt = select(DistributionModel).where(DistributionModel.path == path)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
