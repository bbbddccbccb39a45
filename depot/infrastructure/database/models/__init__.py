"""Database models module."""
from .base import Base, TimestampedModel, SerialModel
from .distribution import DistributionModel
from .package import PackageModel

__all__ = [
    'Base',
    'TimestampedModel',
    'SerialModel',
    'DistributionModel',
    'PackageModel'
]
