"""Archive store interface."""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from depot.core.exceptions import StoreWriteFailedError
from depot.core.distribution.distribution_types import AUTHORS_DIR


class ArchiveStore(ABC):
    """Persists physical archives below the repository root.
    
    Archives are addressed by their location inside the root; the store
    never interprets their content.
    """
    
    def __init__(self, root_dir: Path):
        self.root_dir = Path(root_dir).resolve()
        self.authors_dir = self.root_dir.joinpath(*AUTHORS_DIR)
    
    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the store below the root."""
        pass
    
    @abstractmethod
    async def add_archive(self, source: Path, destination: Optional[Path] = None) -> Path:
        """Add an archive to the store.
        
        Args:
            source: Archive to add
            destination: Location inside the root to copy it to. When
                omitted, source must already be inside the root.
            
        Returns:
            Location of the archive inside the root
        """
        pass
    
    @abstractmethod
    async def remove_archive(self, archive: Path) -> None:
        """Remove an archive from the store."""
        pass
    
    async def commit(self, message: str) -> None:
        """Record pending changes."""
        pass
    
    async def tag(self, name: str) -> None:
        """Label the current state."""
        pass
    
    def _resolve_safe_path(self, path: Path, operation: str) -> Path:
        """Resolve path ensuring it's within the root."""
        path = Path(path)
        full_path = path if path.is_absolute() else self.root_dir / path
        resolved = full_path.resolve()
        
        try:
            resolved.relative_to(self.root_dir)
        except ValueError:
            raise StoreWriteFailedError(
                operation, str(path), "path resolves outside repository root"
            )
        
        return resolved
