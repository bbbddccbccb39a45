"""Repository coordination service.

Keeps the metadata backend and the archive store consistent while
distributions are added, imported and removed. The two backends share no
transaction, so every operation checks all of its preconditions first,
writes metadata, and only then touches the archive store.
"""

import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

from depot.core.config import Settings
from depot.core.distribution import (
    LOCAL_SOURCE,
    DistributionPathResolver,
    PackageExtractor,
    PackageSpec
)
from depot.core.exceptions import (
    ArchiveUnavailableError,
    DistributionNotFoundError,
    DuplicatePathError,
    OwnershipConflictError
)
from depot.infrastructure.database import MetadataBackend
from depot.infrastructure.database.models import DistributionModel, PackageModel
from depot.infrastructure.fetcher import Fetcher
from depot.infrastructure.index_cache import IndexCache
from depot.infrastructure.index_writer import IndexWriter, select_latest
from depot.infrastructure.logging import bind_context, unbind_context
from depot.infrastructure.store import ArchiveStore
from depot.application.services.base import ServiceBase


class RepositoryCoordinator(ServiceBase):
    """Coordinates the metadata backend, archive store and indexes.
    
    A store failure after a successful metadata write is surfaced as-is
    and leaves a metadata record without its archive; no compensating
    rollback is attempted.
    """
    
    def __init__(
        self,
        settings: Settings,
        metadata: MetadataBackend,
        store: ArchiveStore,
        extractor: PackageExtractor,
        fetcher: Fetcher,
        index_cache: IndexCache,
        path_resolver: Optional[DistributionPathResolver] = None,
        index_writer: Optional[IndexWriter] = None
    ):
        """Initialize repository coordinator.
        
        Args:
            settings: Repository settings
            metadata: Metadata backend
            store: Archive store
            extractor: Package extractor
            fetcher: Remote archive fetcher
            index_cache: Upstream index lookup
            path_resolver: Distribution path resolver
            index_writer: Repository index writer
        """
        super().__init__()
        self.settings = settings
        self.metadata = metadata
        self.store = store
        self.extractor = extractor
        self.fetcher = fetcher
        self.index_cache = index_cache
        self.path_resolver = path_resolver or DistributionPathResolver(settings.root_dir)
        self.index_writer = index_writer or IndexWriter(settings.root_dir)
    
    @property
    def root_dir(self) -> Path:
        return self.settings.root_dir
    
    async def initialize(self) -> None:
        """Connect the metadata backend and prepare both backends."""
        await self.metadata.connect()
        await self.metadata.create_schema()
        await self.store.initialize()
    
    async def cleanup(self) -> None:
        await self.metadata.disconnect()
    
    async def add_distribution(
        self,
        archive: Union[str, Path],
        author: str
    ) -> DistributionModel:
        """Add a local archive to the repository.
        
        Args:
            archive: Local archive location
            author: Author adding the archive
            
        Returns:
            The persisted distribution
            
        Raises:
            ArchiveUnavailableError: If the archive is missing or unreadable
            DuplicatePathError: If the computed path is already taken
            OwnershipConflictError: If another author owns a provided package
            MetadataWriteFailedError: If the metadata write fails
            StoreWriteFailedError: If the archive cannot be stored
        """
        archive = Path(archive)
        
        if not archive.exists():
            raise ArchiveUnavailableError(str(archive), "does not exist")
        if not archive.is_file() or not os.access(archive, os.R_OK):
            raise ArchiveUnavailableError(str(archive), "is not readable")
        
        author = self.path_resolver.normalize_author(author)
        path = self.path_resolver.distribution_path(author, archive)
        
        bind_context(operation="add", distribution=path, author=author)
        try:
            await self._ensure_path_is_free(path)
            
            specs = self._extract(archive)
            await self._check_ownership(specs, author)
            
            self.logger.info(
                "adding_distribution",
                path=path,
                package_count=len(specs)
            )
            
            distribution = await self.metadata.create_distribution_with_packages(
                DistributionModel(path=path, source=LOCAL_SOURCE),
                self._new_packages(specs)
            )
            
            await self.store.add_archive(archive, distribution.archive(self.root_dir))
            
            return distribution
        finally:
            unbind_context("operation", "distribution", "author")
    
    async def import_distribution(self, url: str) -> DistributionModel:
        """Import a distribution from an upstream repository.
        
        Args:
            url: URL of the archive inside an upstream authors/id tree
            
        Returns:
            The persisted distribution
            
        Raises:
            InvalidDistributionUrlError: If the URL cannot be parsed
            DuplicatePathError: If the derived path is already taken
            FetchFailedError: If the archive cannot be retrieved
            MetadataWriteFailedError: If the metadata write fails
            StoreWriteFailedError: If the archive cannot be stored
        """
        parsed = self.path_resolver.parse_distribution_url(url)
        
        bind_context(operation="import", distribution=parsed.path, source=parsed.source)
        try:
            await self._ensure_path_is_free(parsed.path)
            
            await self.fetcher.fetch(url, parsed.archive)

            try:
                specs = self._extract(parsed.archive)

                self.logger.info(
                    "importing_distribution",
                    url=url,
                    package_count=len(specs)
                )

                distribution = await self.metadata.create_distribution_with_packages(
                    DistributionModel(path=parsed.path, source=parsed.source),
                    self._new_packages(specs)
                )
            except Exception:
                # Nothing references the staged file yet
                self.logger.warning("discarding_staged_archive", archive=str(parsed.archive))
                parsed.archive.unlink(missing_ok=True)
                raise
            
            await self.store.add_archive(parsed.archive)
            
            return distribution
        finally:
            unbind_context("operation", "distribution", "source")
    
    async def remove_distribution(self, path: str) -> DistributionModel:
        """Remove a distribution and its archive.
        
        Metadata goes first: an orphaned archive only wastes space, while a
        record without its archive breaks clients that trust the index.
        
        Args:
            path: Repository path of the distribution
            
        Returns:
            The removed, detached distribution
            
        Raises:
            DistributionNotFoundError: If no distribution occupies the path
            MetadataWriteFailedError: If the metadata delete fails
            StoreWriteFailedError: If the archive cannot be removed
        """
        distribution = await self.metadata.find_distribution_by_path(path)
        if distribution is None:
            raise DistributionNotFoundError(path)
        
        bind_context(operation="remove", distribution=path)
        try:
            self.logger.info(
                "removing_distribution",
                path=path,
                package_count=distribution.package_count
            )
            
            await self.metadata.delete_distribution(distribution)
            
            await self.store.remove_archive(distribution.archive(self.root_dir))
            
            return distribution
        finally:
            unbind_context("operation", "distribution")
    
    async def locate_remotely(
        self,
        package: str,
        version: Optional[str] = None
    ) -> Optional[str]:
        """Find the upstream distribution URL providing a package."""
        return await self.index_cache.locate(package, version)
    
    async def write_index(self) -> Path:
        """Write the repository package index and register it with the store."""
        rows = await self.metadata.find_packages()
        index_file = self.index_writer.write(select_latest(rows))
        await self.store.add_archive(index_file)
        return index_file
    
    async def commit(self, message: str) -> None:
        await self.store.commit(message)
    
    async def tag(self, name: str) -> None:
        await self.store.tag(name)
    
    async def _ensure_path_is_free(self, path: str) -> None:
        existing = await self.metadata.find_distribution_by_path(path)
        if existing is not None:
            raise DuplicatePathError(path)
    
    def _extract(self, archive: Path) -> List[PackageSpec]:
        specs = self.extractor.provides(archive)
        if not specs:
            self.logger.warning("archive_contains_no_packages", archive=str(archive))
        return specs
    
    async def _check_ownership(self, specs: Sequence[PackageSpec], author: str) -> None:
        """Reject packages whose newest local distribution belongs to another author."""
        for spec in specs:
            incumbents = await self.metadata.find_packages(
                name=spec.name,
                source=LOCAL_SOURCE
            )
            if not incumbents:
                continue
            
            _, distribution = incumbents[0]
            if distribution.author != author:
                raise OwnershipConflictError(spec.name, distribution.author, author)
    
    def _new_packages(self, specs: Sequence[PackageSpec]) -> List[PackageModel]:
        return [PackageModel(name=spec.name, version=spec.version) for spec in specs]
