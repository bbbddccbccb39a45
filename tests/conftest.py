"""Pytest configuration and fixtures"""

import io
import json
import logging
import tarfile
from pathlib import Path
from typing import Callable, Dict, Optional

import httpx
import pytest
import pytest_asyncio
import structlog

from depot.application.services import RepositoryCoordinator
from depot.core.config import Settings
from depot.core.distribution import DistributionPathResolver, PackageExtractor
from depot.infrastructure.database import DatabaseConnection, MetadataBackend
from depot.infrastructure.fetcher import Fetcher
from depot.infrastructure.index_cache import IndexCache
from depot.infrastructure.index_writer import IndexWriter
from depot.infrastructure.logging import clear_context
from depot.infrastructure.store import FileStore

UPSTREAM = "http://cpan.example.org"


@pytest.fixture(autouse=True)
def reset_logging():
    """Give every test a fresh structlog configuration and root logger"""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    
    structlog.reset_defaults()
    clear_context()
    
    yield
    
    structlog.reset_defaults()
    clear_context()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def root_dir(tmp_path: Path) -> Path:
    """Repository root inside the test's temporary directory"""
    return tmp_path / "repo"


@pytest.fixture
def settings(root_dir: Path) -> Settings:
    """Settings for an isolated repository"""
    return Settings(
        root_dir=root_dir,
        database_url=f"sqlite:///{root_dir / '.depot' / 'depot.db'}",
        sources=[UPSTREAM],
        store_backend="file",
    )


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """Factory building real tar.gz distributions
    
    ``modules`` maps package names to versions; each becomes a
    ``lib/`` module declaring the package. ``provides`` writes a
    META.json provides map instead.
    """
    def _make_archive(
        name: str,
        modules: Optional[Dict[str, str]] = None,
        provides: Optional[Dict[str, str]] = None,
        directory: Optional[Path] = None,
    ) -> Path:
        directory = directory or tmp_path / "incoming"
        directory.mkdir(parents=True, exist_ok=True)
        
        top = name
        files: Dict[str, bytes] = {
            f"{top}/Makefile.PL": b"use ExtUtils::MakeMaker;\n",
        }
        for package, version in (modules or {}).items():
            module_path = "/".join(package.split("::")) + ".pm"
            source = f"package {package};\nour $VERSION = '{version}';\n1;\n"
            files[f"{top}/lib/{module_path}"] = source.encode("utf-8")
        if provides is not None:
            meta = {
                "name": name,
                "provides": {
                    package: {"version": version}
                    for package, version in provides.items()
                },
            }
            files[f"{top}/META.json"] = json.dumps(meta).encode("utf-8")
        
        archive = directory / f"{name}.tar.gz"
        with tarfile.open(archive, "w:gz") as tf:
            for member_name, content in files.items():
                info = tarfile.TarInfo(member_name)
                info.size = len(content)
                tf.addfile(info, io.BytesIO(content))
        return archive
    
    return _make_archive


@pytest.fixture
def upstream() -> Dict[str, bytes]:
    """Files served by the mock upstream, keyed by URL path"""
    return {}


@pytest.fixture
def upstream_requests() -> list:
    """URLs requested from the mock upstream"""
    return []


@pytest.fixture
def transport(upstream: Dict[str, bytes], upstream_requests: list) -> httpx.MockTransport:
    """Mock network serving the upstream files"""
    def handler(request: httpx.Request) -> httpx.Response:
        upstream_requests.append(str(request.url))
        content = upstream.get(request.url.path)
        if content is None:
            return httpx.Response(404, text="Not Found")
        return httpx.Response(200, content=content)
    
    return httpx.MockTransport(handler)


@pytest.fixture
def fetcher(transport: httpx.MockTransport) -> Fetcher:
    return Fetcher(timeout=5.0, transport=transport)


@pytest_asyncio.fixture
async def metadata(settings: Settings):
    """Connected metadata backend on a fresh SQLite file"""
    backend = MetadataBackend(DatabaseConnection(settings.database_url))
    await backend.connect()
    await backend.create_schema()
    yield backend
    await backend.disconnect()


@pytest_asyncio.fixture
async def store(settings: Settings) -> FileStore:
    file_store = FileStore(settings.root_dir)
    await file_store.initialize()
    return file_store


@pytest_asyncio.fixture
async def coordinator(
    settings: Settings,
    metadata: MetadataBackend,
    store: FileStore,
    fetcher: Fetcher,
) -> RepositoryCoordinator:
    """Coordinator over a file store and the mock upstream"""
    return RepositoryCoordinator(
        settings=settings,
        metadata=metadata,
        store=store,
        extractor=PackageExtractor(),
        fetcher=fetcher,
        index_cache=IndexCache(settings.sources, settings.cache_dir, fetcher),
        path_resolver=DistributionPathResolver(settings.root_dir),
        index_writer=IndexWriter(settings.root_dir),
    )
