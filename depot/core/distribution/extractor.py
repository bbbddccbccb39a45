"""Package discovery inside distribution archives only"""
import json
import re
import tarfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import Dict, Iterator, List, Optional, Tuple

from depot.core.exceptions import ArchiveUnavailableError

from .distribution_types import UNDEF_VERSION, PackageSpec


class PackageExtractor:
    """Discovers the packages an archive provides"""
    
    TAR_SUFFIXES = ('.tar.gz', '.tgz', '.tar.bz2', '.tbz', '.tar')
    ZIP_SUFFIXES = ('.zip',)
    
    PACKAGE_PATTERN = re.compile(
        r'^\s*package\s+([A-Za-z_][\w:]*)(?:\s+(v?[\d._]+))?\s*[;{]'
    )
    VERSION_PATTERN = re.compile(
        r'\$(?:[\w:]*::)?VERSION\s*=\s*(?:qv\(\s*)?[\'"]?(v?[\d._]+)'
    )
    
    def provides(self, archive: Path) -> List[PackageSpec]:
        """
        List the packages provided by an archive
        
        Packages declared in a ``META.json`` ``provides`` map win. Without
        one, ``.pm`` files under ``lib/`` are scanned for package
        declarations.
        
        Args:
            archive: Archive location
            
        Returns:
            Packages sorted by name, possibly empty
            
        Raises:
            ArchiveUnavailableError: If the archive cannot be read
        """
        archive = Path(archive)
        try:
            members = dict(self._read_members(archive))
        except (tarfile.TarError, zipfile.BadZipFile, OSError, EOFError) as e:
            raise ArchiveUnavailableError(str(archive), f"cannot be read: {e}")
        
        specs = self._from_meta(members)
        if specs is None:
            specs = self._from_modules(members)
        
        return sorted(specs, key=lambda spec: spec.name)
    
    def _read_members(self, archive: Path) -> Iterator[Tuple[PurePosixPath, bytes]]:
        """Yield (path below the top directory, content) for relevant members"""
        name = archive.name.lower()
        
        if name.endswith(self.ZIP_SUFFIXES):
            with zipfile.ZipFile(archive) as zf:
                for info in zf.infolist():
                    relative = self._relative_member(info.filename)
                    if not info.is_dir() and self._is_relevant(relative):
                        yield relative, zf.read(info)
            return
        
        if not name.endswith(self.TAR_SUFFIXES) and not tarfile.is_tarfile(archive):
            raise tarfile.TarError("unsupported archive type")
        
        with tarfile.open(archive, 'r:*') as tf:
            for member in tf:
                if not member.isfile():
                    continue
                relative = self._relative_member(member.name)
                if self._is_relevant(relative):
                    handle = tf.extractfile(member)
                    if handle is not None:
                        yield relative, handle.read()
    
    def _relative_member(self, member_name: str) -> PurePosixPath:
        """Strip the top-level distribution directory from a member name"""
        parts = PurePosixPath(member_name.lstrip('./')).parts
        return PurePosixPath(*parts[1:]) if len(parts) > 1 else PurePosixPath('.')
    
    def _is_relevant(self, relative: PurePosixPath) -> bool:
        if str(relative) == 'META.json':
            return True
        return (
            len(relative.parts) > 1
            and relative.parts[0] == 'lib'
            and relative.suffix == '.pm'
        )
    
    def _from_meta(self, members: Dict[PurePosixPath, bytes]) -> Optional[List[PackageSpec]]:
        """Read the provides map of META.json, if present"""
        content = members.get(PurePosixPath('META.json'))
        if content is None:
            return None
        
        try:
            meta = json.loads(content.decode('utf-8'))
        except (UnicodeDecodeError, ValueError):
            return None
        
        provides = meta.get('provides') if isinstance(meta, dict) else None
        if not isinstance(provides, dict) or not provides:
            return None
        
        specs = []
        for name, info in provides.items():
            if self._is_private(name):
                continue
            version = info.get('version') if isinstance(info, dict) else None
            specs.append(PackageSpec(name, str(version) if version is not None else UNDEF_VERSION))
        return specs
    
    def _from_modules(self, members: Dict[PurePosixPath, bytes]) -> List[PackageSpec]:
        """Scan module sources for package declarations"""
        versions: Dict[str, Optional[str]] = {}
        
        for path in sorted(members):
            if path.suffix != '.pm':
                continue
            current = None
            source = members[path].decode('utf-8', errors='replace')
            
            for line in source.splitlines():
                # Stop at POD-terminated code
                if line.startswith('__END__') or line.startswith('__DATA__'):
                    break
                
                package_match = self.PACKAGE_PATTERN.match(line)
                if package_match:
                    name, inline_version = package_match.groups()
                    if self._is_private(name) or name in versions:
                        current = None
                        continue
                    versions[name] = inline_version
                    current = name
                    continue
                
                version_match = self.VERSION_PATTERN.search(line)
                if version_match and current and versions[current] is None:
                    versions[current] = version_match.group(1)
        
        return [
            PackageSpec(name, version or UNDEF_VERSION)
            for name, version in versions.items()
        ]
    
    def _is_private(self, name: str) -> bool:
        return name.startswith('_') or '::_' in name or name in ('main', 'DB')
