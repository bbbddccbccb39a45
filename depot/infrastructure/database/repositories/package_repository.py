"""Package data access repository."""
from typing import List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from depot.infrastructure.database.models.distribution import DistributionModel
from depot.infrastructure.database.models.package import PackageModel
from depot.infrastructure.database.repositories.base import BaseRepository


class PackageRepository(BaseRepository[PackageModel]):
    """Package data access only."""
    
    def __init__(self, session: AsyncSession):
        super().__init__(session, PackageModel)
    
    async def find_with_distribution(
        self,
        name: Optional[str] = None,
        source: Optional[str] = None
    ) -> List[Tuple[PackageModel, DistributionModel]]:
        """Find packages joined with their distribution, newest first."""
        stmt = (
            select(PackageModel)
            .join(PackageModel.distribution)
            .options(contains_eager(PackageModel.distribution))
            .order_by(DistributionModel.id.desc(), PackageModel.id.desc())
        )
        if name is not None:
            stmt = stmt.where(PackageModel.name == name)
        if source is not None:
            stmt = stmt.where(DistributionModel.source == source)
        
        result = await self.session.execute(stmt)
        return [
            (package, package.distribution)
            for package in result.unique().scalars().all()
        ]
