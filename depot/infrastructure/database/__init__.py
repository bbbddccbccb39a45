"""Database infrastructure module."""
from .connection import DatabaseConnection
from .metadata_backend import MetadataBackend
from .unit_of_work import UnitOfWork

__all__ = [
    'DatabaseConnection',
    'MetadataBackend',
    'UnitOfWork'
]
