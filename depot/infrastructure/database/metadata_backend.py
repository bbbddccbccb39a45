"""Metadata backend for distributions and their packages."""
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError

from depot.core.exceptions import (
    DistributionNotFoundError,
    DuplicatePathError,
    MetadataWriteFailedError
)
from depot.infrastructure.logging import get_logger

from .connection import DatabaseConnection
from .models import Base, DistributionModel, PackageModel
from .repositories.base import IntegrityViolation
from .unit_of_work import UnitOfWork

logger = get_logger(__name__)


class MetadataBackend:
    """Stores distribution and package records.
    
    Every method runs in its own unit of work. Records returned to the
    caller are detached but fully loaded, so their packages and owning
    distributions stay readable after the session closes.
    """
    
    def __init__(self, connection: DatabaseConnection):
        self.connection = connection
    
    async def connect(self) -> None:
        await self.connection.connect()
    
    async def disconnect(self) -> None:
        await self.connection.disconnect()
    
    async def create_schema(self) -> None:
        """Create tables that do not exist yet."""
        async with self.connection.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    
    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncIterator[UnitOfWork]:
        async with self.connection.get_session() as session:
            async with UnitOfWork(session) as uow:
                yield uow
    
    async def find_distribution_by_path(self, path: str) -> Optional[DistributionModel]:
        """Find the distribution occupying a repository path."""
        async with self._unit_of_work() as uow:
            return await uow.distributions.find_by_path(path)
    
    async def find_packages(
        self,
        name: Optional[str] = None,
        source: Optional[str] = None
    ) -> List[Tuple[PackageModel, DistributionModel]]:
        """Find packages with their owning distribution, newest distribution first.
        
        Args:
            name: Only packages with this name
            source: Only packages whose distribution has this source
        """
        async with self._unit_of_work() as uow:
            return await uow.packages.find_with_distribution(name=name, source=source)
    
    async def list_distributions(self) -> List[DistributionModel]:
        async with self._unit_of_work() as uow:
            return await uow.distributions.find_all(limit=None)
    
    async def create_distribution_with_packages(
        self,
        distribution: DistributionModel,
        packages: Sequence[PackageModel]
    ) -> DistributionModel:
        """Insert a distribution and its packages in one transaction.
        
        Raises:
            DuplicatePathError: If another distribution holds the path
            MetadataWriteFailedError: If the database rejects the write
        """
        distribution.packages = list(packages)
        try:
            async with self._unit_of_work() as uow:
                await uow.distributions.save(distribution)
        except IntegrityViolation as e:
            # The only unique key on distributions is the path
            raise DuplicatePathError(distribution.path) from e
        except SQLAlchemyError as e:
            raise MetadataWriteFailedError("create_distribution", str(e)) from e
        
        logger.debug(
            "distribution_persisted",
            path=distribution.path,
            package_count=len(distribution.packages)
        )
        return distribution
    
    async def delete_distribution(self, distribution: DistributionModel) -> None:
        """Delete a distribution; its packages cascade.
        
        Raises:
            DistributionNotFoundError: If the record vanished meanwhile
            MetadataWriteFailedError: If the database rejects the write
        """
        try:
            async with self._unit_of_work() as uow:
                deleted = await uow.distributions.delete(distribution.id)
        except SQLAlchemyError as e:
            raise MetadataWriteFailedError("delete_distribution", str(e)) from e
        
        if not deleted:
            raise DistributionNotFoundError(distribution.path)
        
        logger.debug("distribution_deleted", path=distribution.path)
