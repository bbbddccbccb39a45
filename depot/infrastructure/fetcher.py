"""Remote archive retrieval."""
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

import aiofiles
import aiofiles.os
import httpx

from depot.core.exceptions import FetchFailedError
from depot.infrastructure.logging import get_logger

logger = get_logger(__name__)


class Fetcher:
    """Downloads URLs to local files."""
    
    CHUNK_SIZE = 64 * 1024
    
    def __init__(
        self,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize fetcher.
        
        Args:
            timeout: Network timeout in seconds
            transport: Optional httpx transport, e.g. for a mock network
        """
        self.timeout = timeout
        self.transport = transport
    
    async def fetch(self, url: str, destination: Path) -> Path:
        """
        Retrieve a URL into a local file.
        
        The file appears at destination only once it is complete.
        
        Args:
            url: http(s) or file URL
            destination: Local file to write
            
        Returns:
            The destination path
            
        Raises:
            FetchFailedError: If the URL cannot be retrieved
        """
        destination = Path(destination)
        scheme = urlsplit(url).scheme
        
        if scheme not in ("http", "https", "file"):
            raise FetchFailedError(url, f"unsupported URL scheme '{scheme}'")
        
        try:
            await aiofiles.os.makedirs(destination.parent, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=destination.parent,
                prefix=".fetch-",
                delete=False
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)
        except OSError as e:
            raise FetchFailedError(url, str(e))
        
        logger.info("fetching", url=url, destination=str(destination))
        
        try:
            if scheme == "file":
                await self._copy_local(url, tmp_path)
            else:
                await self._download(url, tmp_path)
            await aiofiles.os.rename(tmp_path, destination)
        except (httpx.HTTPError, OSError) as e:
            raise FetchFailedError(url, str(e)) from e
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
        
        return destination
    
    async def _download(self, url: str, target: Path) -> None:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True
        ) as client:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                async with aiofiles.open(target, 'wb') as f:
                    async for chunk in response.aiter_bytes(self.CHUNK_SIZE):
                        await f.write(chunk)
    
    async def _copy_local(self, url: str, target: Path) -> None:
        source = Path(unquote(urlsplit(url).path))
        async with aiofiles.open(source, 'rb') as src:
            async with aiofiles.open(target, 'wb') as dst:
                while True:
                    chunk = await src.read(self.CHUNK_SIZE)
                    if not chunk:
                        break
                    await dst.write(chunk)
