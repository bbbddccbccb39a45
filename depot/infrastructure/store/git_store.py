"""Archive store kept under Git version control."""
from pathlib import Path
from typing import Dict, List, Optional

import aiofiles

from depot.core.exceptions import StoreWriteFailedError
from depot.infrastructure.logging import get_logger

from .file_store import FileStore
from .git_command import GitCommandExecutor, GitError

logger = get_logger(__name__)


class GitStore(FileStore):
    """File store whose root is a Git work tree.
    
    Added and removed archives are staged; ``commit`` and ``tag`` record
    the staged changes in the repository history.
    """
    
    IGNORED = ".depot/\n"
    
    def __init__(
        self,
        root_dir: Path,
        executor: GitCommandExecutor,
        author_name: str = "Depot",
        author_email: str = "depot@localhost"
    ):
        super().__init__(root_dir)
        self.executor = executor
        self.author_name = author_name
        self.author_email = author_email
    
    @property
    def identity(self) -> Dict[str, str]:
        return {
            'GIT_AUTHOR_NAME': self.author_name,
            'GIT_AUTHOR_EMAIL': self.author_email,
            'GIT_COMMITTER_NAME': self.author_name,
            'GIT_COMMITTER_EMAIL': self.author_email,
        }
    
    async def initialize(self) -> None:
        await super().initialize()
        
        if not (self.root_dir / '.git').exists():
            await self._git('initialize', self.root_dir, ['init', '-q'])
            logger.info("git_store_initialized", root=str(self.root_dir))
        
        gitignore = self.root_dir / '.gitignore'
        if not gitignore.exists():
            async with aiofiles.open(gitignore, 'w') as f:
                await f.write(self.IGNORED)
            await self._git('initialize', gitignore, ['add', '--', '.gitignore'])
    
    async def add_archive(self, source: Path, destination: Optional[Path] = None) -> Path:
        archive = await super().add_archive(source, destination)
        await self._git('add_archive', archive, ['add', '--', self._relative(archive)])
        return archive
    
    async def remove_archive(self, archive: Path) -> None:
        archive_path = self._resolve_safe_path(archive, 'remove_archive')
        await self._git(
            'remove_archive',
            archive_path,
            ['rm', '-q', '--cached', '--ignore-unmatch', '--', self._relative(archive_path)]
        )
        await super().remove_archive(archive_path)
    
    async def commit(self, message: str) -> None:
        status = await self._git('commit', self.root_dir, ['status', '--porcelain', '-uno'])
        if not status.stdout.strip():
            logger.info("git_store_nothing_to_commit")
            return
        
        await self._git(
            'commit',
            self.root_dir,
            ['commit', '-q', '-F', '-'],
            input_data=message.encode('utf-8')
        )
        logger.info("git_store_committed", message=message.splitlines()[0] if message else "")
    
    async def tag(self, name: str) -> None:
        if not name or name.startswith('-'):
            raise StoreWriteFailedError('tag', name, "invalid tag name")
        await self._git('tag', self.root_dir, ['tag', name])
        logger.info("git_store_tagged", tag=name)
    
    def _relative(self, path: Path) -> str:
        return Path(path).relative_to(self.root_dir).as_posix()
    
    async def _git(
        self,
        operation: str,
        path: Path,
        args: List[str],
        input_data: Optional[bytes] = None
    ):
        try:
            return await self.executor.execute(
                args,
                cwd=self.root_dir,
                input_data=input_data,
                env=self.identity
            )
        except GitError as e:
            raise StoreWriteFailedError(operation, str(path), str(e))
