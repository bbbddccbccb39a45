"""Database repositories module."""
from .base import BaseRepository, RepositoryError, IntegrityViolation
from .distribution_repository import DistributionRepository
from .package_repository import PackageRepository

__all__ = [
    'BaseRepository',
    'RepositoryError',
    'IntegrityViolation',
    'DistributionRepository',
    'PackageRepository'
]
