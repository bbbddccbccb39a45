"""Cache of upstream package indexes for remote lookups."""
import gzip
import hashlib
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence, Tuple

from depot.core.distribution.versions import compare_versions
from depot.infrastructure.fetcher import Fetcher
from depot.infrastructure.logging import get_logger

logger = get_logger(__name__)

INDEX_URL_PATH = "modules/02packages.details.txt.gz"

# package name -> (version, path below authors/id)
IndexEntries = Dict[str, Tuple[str, str]]


def read_index(index_file: Path) -> Iterator[Tuple[str, str, str]]:
    """Yield (name, version, path) lines of a 02packages index."""
    with gzip.open(index_file, 'rt', encoding='utf-8', errors='replace') as handle:
        # Header ends with the first blank line
        for line in handle:
            if not line.strip():
                break
        for line in handle:
            fields = line.split()
            if len(fields) >= 3:
                yield fields[0], fields[1], fields[2]


class IndexCache:
    """Resolves package names to distribution URLs on upstream sources.
    
    Each source's index is downloaded once into the cache directory and
    reused afterwards; keeping it fresh is left to the operator.
    """
    
    def __init__(self, sources: Sequence[str], cache_dir: Path, fetcher: Fetcher):
        self.sources = [source.rstrip('/') for source in sources]
        self.cache_dir = Path(cache_dir)
        self.fetcher = fetcher
        self._indexes: Dict[str, IndexEntries] = {}
    
    async def locate(self, package: str, version: Optional[str] = None) -> Optional[str]:
        """
        Find the distribution URL providing a package.
        
        Args:
            package: Package name, e.g. ``Foo::Bar``
            version: Minimum acceptable version
            
        Returns:
            URL of the distribution on the first source that has a
            matching entry, or None
        """
        for source in self.sources:
            entries = await self._load(source)
            entry = entries.get(package)
            if entry is None:
                continue
            
            entry_version, path = entry
            if version is not None and compare_versions(entry_version, version) < 0:
                logger.debug(
                    "index_entry_too_old",
                    source=source,
                    package=package,
                    found=entry_version,
                    wanted=version
                )
                continue
            
            return f"{source}/authors/id/{path}"
        
        return None
    
    def cache_file(self, source: str) -> Path:
        digest = hashlib.sha1(source.encode('utf-8')).hexdigest()[:16]
        return self.cache_dir / digest / "02packages.details.txt.gz"
    
    async def _load(self, source: str) -> IndexEntries:
        if source in self._indexes:
            return self._indexes[source]
        
        cache_file = self.cache_file(source)
        if not cache_file.exists():
            await self.fetcher.fetch(f"{source}/{INDEX_URL_PATH}", cache_file)
        
        entries: IndexEntries = {}
        for name, version, path in read_index(cache_file):
            entries.setdefault(name, (version, path))
        
        logger.debug("index_loaded", source=source, package_count=len(entries))
        self._indexes[source] = entries
        return entries
