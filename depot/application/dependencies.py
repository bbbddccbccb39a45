"""Wiring of the default repository collaborators."""

from depot.core.config import Settings
from depot.core.distribution import DistributionPathResolver, PackageExtractor
from depot.infrastructure.database import DatabaseConnection, MetadataBackend
from depot.infrastructure.fetcher import Fetcher
from depot.infrastructure.index_cache import IndexCache
from depot.infrastructure.index_writer import IndexWriter
from depot.infrastructure.store import create_store
from depot.application.services.repository_coordinator import RepositoryCoordinator


def get_metadata_backend(settings: Settings) -> MetadataBackend:
    """Get the metadata backend for the configured database."""
    connection = DatabaseConnection(settings.database_url, echo=settings.database_echo)
    return MetadataBackend(connection)


def get_fetcher(settings: Settings) -> Fetcher:
    return Fetcher(timeout=settings.fetch_timeout)


def build_coordinator(settings: Settings) -> RepositoryCoordinator:
    """
    Build a repository coordinator with the default collaborators.
    
    Args:
        settings: Repository settings
        
    Returns:
        Coordinator that still needs ``initialize()`` before use
    """
    fetcher = get_fetcher(settings)
    
    return RepositoryCoordinator(
        settings=settings,
        metadata=get_metadata_backend(settings),
        store=create_store(settings),
        extractor=PackageExtractor(),
        fetcher=fetcher,
        index_cache=IndexCache(settings.sources, settings.cache_dir, fetcher),
        path_resolver=DistributionPathResolver(settings.root_dir),
        index_writer=IndexWriter(settings.root_dir)
    )
