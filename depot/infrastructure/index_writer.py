"""Writer for the repository package index (02packages.details.txt.gz)."""
import gzip
import os
import tempfile
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from depot.core.distribution.versions import version_key
from depot.infrastructure.database.models import DistributionModel, PackageModel
from depot.infrastructure.logging import get_logger

logger = get_logger(__name__)

INDEX_PATH = ("modules", "02packages.details.txt.gz")

PackageRow = Tuple[PackageModel, DistributionModel]


def select_latest(rows: Iterable[PackageRow]) -> List[PackageRow]:
    """
    Pick the package that represents each name in the index.
    
    A package from a local distribution always wins over imported ones,
    the newest local distribution first. Among imported packages the
    highest version wins, ties going to the newest distribution.
    """
    chosen: Dict[str, PackageRow] = {}
    
    for row in rows:
        package = row[0]
        current = chosen.get(package.name)
        if current is None or _rank(row) > _rank(current):
            chosen[package.name] = row
    
    return sorted(chosen.values(), key=lambda row: row[0].name.lower())


def _rank(row: PackageRow):
    package, distribution = row
    return (
        distribution.is_local,
        distribution.id if distribution.is_local else 0,
        version_key(package.version),
        distribution.id,
    )


class IndexWriter:
    """Writes the package index below the repository root."""
    
    def __init__(self, root_dir: Path):
        self.root_dir = Path(root_dir).resolve()
    
    @property
    def index_file(self) -> Path:
        return self.root_dir.joinpath(*INDEX_PATH)
    
    def write(self, rows: Iterable[PackageRow]) -> Path:
        """
        Write the index for the given (package, distribution) rows.
        
        Args:
            rows: Packages to list, one per name
            
        Returns:
            Location of the written index
        """
        rows = list(rows)
        index_file = self.index_file
        index_file.parent.mkdir(parents=True, exist_ok=True)
        
        fd, tmp_name = tempfile.mkstemp(dir=index_file.parent, prefix=".tmp-")
        os.close(fd)
        try:
            with gzip.open(tmp_name, 'wt', encoding='utf-8') as handle:
                handle.write(self._header(len(rows)))
                for package, distribution in rows:
                    handle.write(self._line(package, distribution))
            os.replace(tmp_name, index_file)
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
        
        logger.info("index_written", index=str(index_file), line_count=len(rows))
        return index_file
    
    def _header(self, line_count: int) -> str:
        updated = format_datetime(datetime.now(timezone.utc), usegmt=True)
        fields = [
            ("File", "02packages.details.txt"),
            ("Description", "Package names found in directory $CPAN/authors/id/"),
            ("Columns", "package name, version, path"),
            ("Intended-For", "Automated fetch routines, namespace documentation."),
            ("Written-By", "Depot"),
            ("Line-Count", str(line_count)),
            ("Last-Updated", updated),
        ]
        header = "".join(f"{name + ':':<14}{value}\n" for name, value in fields)
        return header + "\n"
    
    def _line(self, package: PackageModel, distribution: DistributionModel) -> str:
        name = package.name
        version = package.version
        # Keep the two first columns aligned like the CPAN index
        width = max(1, 40 - len(name) - 1)
        return f"{name} {version:>{width}}  {distribution.path}\n"
