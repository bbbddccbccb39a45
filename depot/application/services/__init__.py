"""Application services."""
from .base import ServiceBase
from .repository_coordinator import RepositoryCoordinator

__all__ = [
    "ServiceBase",
    "RepositoryCoordinator",
]
