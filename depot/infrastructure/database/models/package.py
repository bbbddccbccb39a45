"""Package database model."""
from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from depot.core.distribution.distribution_types import UNDEF_VERSION
from .base import SerialModel

if TYPE_CHECKING:
    from .distribution import DistributionModel


class PackageModel(SerialModel):
    """Package database model."""
    __tablename__ = "packages"
    
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True
    )
    version: Mapped[str] = mapped_column(
        String(64),
        default=UNDEF_VERSION,
        nullable=False
    )
    distribution_id: Mapped[int] = mapped_column(
        ForeignKey("distributions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    # Relationships
    distribution: Mapped["DistributionModel"] = relationship(
        back_populates="packages"
    )
    
    @property
    def vname(self) -> str:
        return f"{self.name}-{self.version}"
    
    def __str__(self) -> str:
        return self.vname
