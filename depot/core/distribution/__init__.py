"""Distribution domain core module"""
from .extractor import PackageExtractor
from .path_resolver import DistributionPathResolver
from .versions import compare_versions, version_key
from .distribution_types import (
    AUTHORS_DIR,
    LOCAL_SOURCE,
    UNDEF_VERSION,
    PackageSpec,
    ParsedDistributionUrl
)

__all__ = [
    'PackageExtractor',
    'DistributionPathResolver',
    'compare_versions',
    'version_key',
    'AUTHORS_DIR',
    'LOCAL_SOURCE',
    'UNDEF_VERSION',
    'PackageSpec',
    'ParsedDistributionUrl'
]
