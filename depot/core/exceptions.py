"""Base exception classes for Depot"""

from typing import Any, Dict, Optional


class DepotError(Exception):
    """Base exception for all Depot errors"""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(DepotError):
    """Raised when configuration is invalid"""
    pass


class InvalidAuthorError(DepotError):
    """Raised when an author identifier cannot name an author directory"""
    
    def __init__(self, author: str):
        self.author = author
        super().__init__(
            f"Invalid author identifier: {author!r}",
            {"author": author}
        )


class InvalidDistributionUrlError(DepotError):
    """Raised when a URL does not point into an authors/id tree"""
    
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(
            f"Cannot parse distribution URL {url}: {reason}",
            {"url": url, "reason": reason}
        )


class ArchiveUnavailableError(DepotError):
    """Raised when a source archive is missing, unreadable or corrupt"""
    
    def __init__(self, archive: str, reason: str):
        self.archive = archive
        self.reason = reason
        super().__init__(
            f"Archive {archive} {reason}",
            {"archive": archive, "reason": reason}
        )


class NotFoundError(DepotError):
    """Base class for not found errors"""
    
    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} {resource_id} does not exist",
            {
                "resource_type": resource_type,
                "resource_id": resource_id
            }
        )


class DistributionNotFoundError(NotFoundError):
    """Raised when no distribution occupies a path"""
    
    def __init__(self, path: str):
        self.path = path
        super().__init__("Distribution", path)


class ConflictError(DepotError):
    """Raised when resource already exists"""
    
    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} {resource_id} already exists",
            {
                "resource_type": resource_type,
                "resource_id": resource_id
            }
        )


class DuplicatePathError(ConflictError):
    """Raised when a distribution already occupies a path"""
    
    def __init__(self, path: str):
        self.path = path
        super().__init__("Distribution", path)


class OwnershipConflictError(DepotError):
    """Raised when an author tries to update a package owned by another author"""
    
    def __init__(self, package: str, owner: str, author: str):
        self.package = package
        self.owner = owner
        self.author = author
        super().__init__(
            f"Only author {owner} can update package {package}",
            {
                "package": package,
                "owner": owner,
                "author": author
            }
        )


class FetchFailedError(DepotError):
    """Raised when a remote archive cannot be retrieved"""
    
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(
            f"Failed to fetch {url}: {reason}",
            {"url": url, "reason": reason}
        )


class StoreWriteFailedError(DepotError):
    """Raised when the archive store rejects a write"""
    
    def __init__(self, operation: str, path: str, reason: str):
        self.operation = operation
        self.path = path
        self.reason = reason
        super().__init__(
            f"Store operation '{operation}' failed for {path}: {reason}",
            {
                "operation": operation,
                "path": path,
                "reason": reason
            }
        )


class MetadataWriteFailedError(DepotError):
    """Raised when the metadata backend rejects a write"""
    
    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(
            f"Metadata operation '{operation}' failed: {reason}",
            {"operation": operation, "reason": reason}
        )
