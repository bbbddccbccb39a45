"""Archive store implementations."""
from typing import Callable, Dict

from depot.core.config import Settings
from depot.core.exceptions import ConfigurationError

from .base import ArchiveStore
from .file_store import FileStore
from .git_command import GitCommandExecutor
from .git_store import GitStore


def _create_file_store(settings: Settings) -> ArchiveStore:
    return FileStore(settings.root_dir)


def _create_git_store(settings: Settings) -> ArchiveStore:
    return GitStore(
        settings.root_dir,
        GitCommandExecutor(settings.git_binary_path, settings.git_timeout),
        author_name=settings.git_author_name,
        author_email=settings.git_author_email
    )


STORE_BACKENDS: Dict[str, Callable[[Settings], ArchiveStore]] = {
    "file": _create_file_store,
    "git": _create_git_store,
}


def create_store(settings: Settings) -> ArchiveStore:
    """Build the archive store selected by ``settings.store_backend``."""
    try:
        factory = STORE_BACKENDS[settings.store_backend]
    except KeyError:
        raise ConfigurationError(
            f"Unknown store backend: {settings.store_backend}",
            {"store_backend": settings.store_backend}
        )
    return factory(settings)


__all__ = [
    'ArchiveStore',
    'FileStore',
    'GitStore',
    'GitCommandExecutor',
    'STORE_BACKENDS',
    'create_store'
]
