"""Distribution path calculation only"""
import re
from pathlib import Path, PurePosixPath
from typing import Union
from urllib.parse import unquote, urlsplit

from depot.core.exceptions import InvalidAuthorError, InvalidDistributionUrlError

from .distribution_types import AUTHORS_DIR, ParsedDistributionUrl


class DistributionPathResolver:
    """Handles distribution path calculation only"""
    
    # Author identifiers as used by PAUSE
    AUTHOR_PATTERN = re.compile(r'^[A-Z0-9][A-Z0-9-]*$')
    
    # <prefix>/authors/id/<A>/<AU>/<AUTHOR>/<file...>
    URL_PATH_PATTERN = re.compile(
        r'^(?P<prefix>.*?)/authors/id/(?P<path>[^/]+/[^/]+/[^/]+/[^/].*)$'
    )
    
    def __init__(self, root_dir: Path):
        """
        Initialize with repository root
        
        Args:
            root_dir: Root directory of the repository
        """
        self.root_dir = Path(root_dir).resolve()
    
    def normalize_author(self, author: str) -> str:
        """
        Normalize an author identifier
        
        Args:
            author: Author identifier in any case
            
        Returns:
            Upper-cased author identifier
            
        Raises:
            InvalidAuthorError: If the identifier is empty or malformed
        """
        normalized = (author or '').strip().upper()
        if not self.AUTHOR_PATTERN.match(normalized):
            raise InvalidAuthorError(author)
        return normalized
    
    def author_dir(self, author: str) -> PurePosixPath:
        """Author directory, e.g. ``A/AL/ALICE`` for ``alice``"""
        author = self.normalize_author(author)
        return PurePosixPath(author[:1], author[:2], author)
    
    def distribution_path(self, author: str, archive: Union[str, Path]) -> str:
        """
        Calculate the repository path of an archive added by an author
        
        Args:
            author: Author identifier
            archive: Local archive location
            
        Returns:
            Repository-relative POSIX path
        """
        return str(self.author_dir(author) / Path(archive).name)
    
    def archive_location(self, path: str) -> Path:
        """Physical location of the archive for a repository path"""
        return self.root_dir.joinpath(*AUTHORS_DIR, *PurePosixPath(path).parts)
    
    def author_from_path(self, path: str) -> str:
        """Extract the author identifier from a repository path"""
        parts = PurePosixPath(path).parts
        if len(parts) < 4:
            raise InvalidAuthorError(path)
        return parts[2]
    
    def parse_distribution_url(self, url: str) -> ParsedDistributionUrl:
        """
        Split a remote distribution URL into its repository components
        
        Args:
            url: URL such as ``http://cpan.example.org/authors/id/A/AL/ALICE/Foo-1.0.tar.gz``
            
        Returns:
            Source origin, repository path, author and staging location
            
        Raises:
            InvalidDistributionUrlError: If the URL is not inside an authors/id tree
        """
        parts = urlsplit(url)
        if not parts.scheme:
            raise InvalidDistributionUrlError(url, "missing scheme")
        
        match = self.URL_PATH_PATTERN.match(unquote(parts.path))
        if not match:
            raise InvalidDistributionUrlError(url, "path is not inside authors/id")
        
        path = match.group('path')
        segments = PurePosixPath(path).parts
        if '..' in segments or path.endswith('/'):
            raise InvalidDistributionUrlError(url, "path must name an archive file")
        
        author = self.author_from_path(path)
        try:
            expected = self.author_dir(author)
        except InvalidAuthorError:
            raise InvalidDistributionUrlError(url, f"invalid author {author}")
        if PurePosixPath(*segments[:3]) != expected:
            raise InvalidDistributionUrlError(
                url, f"author directory does not match author {author}"
            )
        
        source = f"{parts.scheme}://{parts.netloc}{match.group('prefix')}"
        
        return ParsedDistributionUrl(
            source=source,
            path=path,
            author=author,
            archive=self.archive_location(path)
        )
