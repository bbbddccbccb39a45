"""Plain filesystem archive store."""
import tempfile
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from depot.core.exceptions import StoreWriteFailedError
from depot.infrastructure.logging import get_logger

from .base import ArchiveStore

logger = get_logger(__name__)


class FileStore(ArchiveStore):
    """Keeps archives as plain files under ``<root>/authors/id``."""
    
    CHUNK_SIZE = 64 * 1024
    
    async def initialize(self) -> None:
        try:
            await aiofiles.os.makedirs(self.authors_dir, exist_ok=True)
        except OSError as e:
            raise StoreWriteFailedError("initialize", str(self.root_dir), str(e))
        logger.debug("store_initialized", root=str(self.root_dir))
    
    async def add_archive(self, source: Path, destination: Optional[Path] = None) -> Path:
        source = Path(source)
        
        if destination is None:
            staged = self._resolve_safe_path(source, "add_archive")
            if not staged.is_file():
                raise StoreWriteFailedError("add_archive", str(source), "archive does not exist")
            logger.debug("archive_registered", archive=str(staged))
            return staged
        
        dest_path = self._resolve_safe_path(destination, "add_archive")
        if not source.is_file():
            raise StoreWriteFailedError("add_archive", str(source), "archive does not exist")
        
        tmp_path = None
        try:
            await aiofiles.os.makedirs(dest_path.parent, exist_ok=True)
            
            # Write to temporary file first
            with tempfile.NamedTemporaryFile(
                dir=dest_path.parent,
                prefix=".tmp-",
                delete=False
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)
            
            async with aiofiles.open(source, 'rb') as src:
                async with aiofiles.open(tmp_path, 'wb') as dst:
                    while True:
                        chunk = await src.read(self.CHUNK_SIZE)
                        if not chunk:
                            break
                        await dst.write(chunk)
            
            # Atomic rename
            await aiofiles.os.rename(tmp_path, dest_path)
            tmp_path = None
        except OSError as e:
            raise StoreWriteFailedError("add_archive", str(dest_path), str(e))
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
        
        logger.debug("archive_added", source=str(source), archive=str(dest_path))
        return dest_path
    
    async def remove_archive(self, archive: Path) -> None:
        archive_path = self._resolve_safe_path(archive, "remove_archive")
        
        if not archive_path.exists():
            logger.warning("archive_already_absent", archive=str(archive_path))
            return
        
        try:
            await aiofiles.os.remove(archive_path)
            await self._prune_empty_directories(archive_path.parent)
        except OSError as e:
            raise StoreWriteFailedError("remove_archive", str(archive_path), str(e))
        
        logger.debug("archive_removed", archive=str(archive_path))
    
    async def commit(self, message: str) -> None:
        logger.debug("store_commit_skipped", reason="file store has no history")
    
    async def tag(self, name: str) -> None:
        logger.debug("store_tag_skipped", tag=name, reason="file store has no history")
    
    async def _prune_empty_directories(self, directory: Path) -> None:
        """Remove empty author directories up to authors/id."""
        while directory != self.authors_dir and self.authors_dir in directory.parents:
            if await aiofiles.os.listdir(directory):
                break
            await aiofiles.os.rmdir(directory)
            directory = directory.parent
