"""Distribution-related type definitions"""
from dataclasses import dataclass
from pathlib import Path

# Source recorded for archives added directly to this repository
LOCAL_SOURCE = "LOCAL"

# Archives live under <root>/authors/id/<A>/<AU>/<AUTHOR>/<file>
AUTHORS_DIR = ("authors", "id")

# Version recorded for packages that declare none
UNDEF_VERSION = "undef"


@dataclass(frozen=True)
class PackageSpec:
    """A package discovered inside an archive"""
    name: str
    version: str = UNDEF_VERSION


@dataclass(frozen=True)
class ParsedDistributionUrl:
    """Components of a remote distribution URL"""
    source: str
    path: str
    author: str
    archive: Path
