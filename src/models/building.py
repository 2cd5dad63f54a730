"""Building ORM model for managed properties."""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class Building(Base, BaseModel):
    """Model representing a managed building.

    The short code is derived from the building name when it is created and
    becomes part of every tenant username issued for rooms in the building.
    """

    __tablename__ = "buildings"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    code: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Short code from the first letter of each word in the name (e.g. 'gv')",
    )
    address: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    # Relationships
    rooms: Mapped[list["Room"]] = relationship(  # noqa: F821
        "Room",
        back_populates="building",
        cascade="all, delete-orphan",
        order_by="Room.room_number",
    )
    tenants: Mapped[list["Tenant"]] = relationship(  # noqa: F821
        "Tenant",
        back_populates="building",
    )

    __table_args__ = (
        Index("idx_building_name", "name"),
        Index("idx_building_code", "code"),
    )

    def __repr__(self) -> str:
        return f"<Building(id={self.id}, name={self.name!r}, code={self.code!r})>"


__all__ = ["Building"]
