"""Distribution database model."""
from pathlib import Path, PurePosixPath
from typing import List, TYPE_CHECKING, Union

from sqlalchemy import String, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from depot.core.distribution.distribution_types import AUTHORS_DIR, LOCAL_SOURCE
from .base import SerialModel

if TYPE_CHECKING:
    from .package import PackageModel


class DistributionModel(SerialModel):
    """Distribution database model."""
    __tablename__ = "distributions"
    
    path: Mapped[str] = mapped_column(
        String(1024),
        unique=True,
        nullable=False,
        index=True
    )
    source: Mapped[str] = mapped_column(
        String(1024),
        default=LOCAL_SOURCE,
        nullable=False,
        index=True
    )
    
    # Relationships
    packages: Mapped[List["PackageModel"]] = relationship(
        back_populates="distribution",
        cascade="all, delete-orphan",
        order_by="PackageModel.id",
        lazy="selectin"
    )
    
    __table_args__ = (
        CheckConstraint(
            "LENGTH(path) >= 1",
            name="distribution_path_length"
        ),
    )
    
    @property
    def author(self) -> str:
        """Author identifier, the third segment of the path."""
        return PurePosixPath(self.path).parts[2]
    
    @property
    def is_local(self) -> bool:
        return self.source == LOCAL_SOURCE
    
    @property
    def package_count(self) -> int:
        return len(self.packages)
    
    def archive(self, root_dir: Union[str, Path]) -> Path:
        """Physical archive location below a repository root."""
        return Path(root_dir).joinpath(*AUTHORS_DIR, *PurePosixPath(self.path).parts)
    
    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "source": self.source,
            "author": self.author,
            "packages": [package.vname for package in self.packages],
        }
    
    def __str__(self) -> str:
        return self.path
