"""Unit of Work pattern for transaction management."""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from .repositories.distribution_repository import DistributionRepository
from .repositories.package_repository import PackageRepository


class UnitOfWork:
    """Unit of Work pattern for transaction management."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self._distributions: Optional[DistributionRepository] = None
        self._packages: Optional[PackageRepository] = None
    
    @property
    def distributions(self) -> DistributionRepository:
        """Get distribution repository."""
        if self._distributions is None:
            self._distributions = DistributionRepository(self.session)
        return self._distributions
    
    @property
    def packages(self) -> PackageRepository:
        """Get package repository."""
        if self._packages is None:
            self._packages = PackageRepository(self.session)
        return self._packages
    
    async def commit(self) -> None:
        """Commit transaction."""
        await self.session.commit()
    
    async def rollback(self) -> None:
        """Rollback transaction."""
        await self.session.rollback()
    
    async def __aenter__(self):
        """Enter transaction context."""
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit transaction context."""
        if exc_type is not None:
            await self.rollback()
        else:
            await self.commit()
