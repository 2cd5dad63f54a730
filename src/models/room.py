"""Room ORM model for rentable units inside a building."""

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class Room(Base, BaseModel):
    """Model representing a room (unit) in a building.

    is_occupied duplicates tenant state and is kept in sync by TenantService
    whenever a tenant is created, vacated or deleted.
    """

    __tablename__ = "rooms"

    building_id: Mapped[int] = mapped_column(
        ForeignKey("buildings.id"),
        nullable=False,
        index=True,
    )
    room_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Room label as shown to people (e.g. 'A-101')",
    )
    is_occupied: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    # Relationships
    building: Mapped["Building"] = relationship(  # noqa: F821
        "Building",
        back_populates="rooms",
    )

    __table_args__ = (
        UniqueConstraint("building_id", "room_number", name="uq_room_building_number"),
        Index("idx_room_building_occupied", "building_id", "is_occupied"),
    )

    def __repr__(self) -> str:
        return (
            f"<Room(id={self.id}, building_id={self.building_id}, "
            f"room_number={self.room_number!r}, is_occupied={self.is_occupied})>"
        )


__all__ = ["Room"]
