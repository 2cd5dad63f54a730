"""Tenant ORM model with billing terms and login credentials."""

from datetime import date
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import Date, Enum, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class TenantStatus(str, PyEnum):
    """Tenancy status."""

    ACTIVE = "active"
    """Tenant currently occupies the room and is billed monthly."""

    VACATED = "vacated"
    """Tenant moved out; history is kept, the room is free."""


class Tenant(Base, BaseModel):
    """Model representing a renter occupying a room.

    Billing terms (rent + maintenance) are read as current values when
    evaluating any month: editing them changes past months too.
    """

    __tablename__ = "tenants"

    # Foreign keys
    building_id: Mapped[int] = mapped_column(
        ForeignKey("buildings.id"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[int] = mapped_column(
        ForeignKey("rooms.id"),
        nullable=False,
        index=True,
    )

    # Identity
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Login
    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Derived as '<room>@<building code>'",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the generated password",
    )

    # Billing terms
    rent: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="Monthly rent",
    )
    maintenance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Monthly maintenance charge",
    )
    advance_paid: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Security deposit collected at move-in",
    )

    # Agreement
    agreement_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    agreement_end: Mapped[date | None] = mapped_column(Date, nullable=True)

    status: Mapped[TenantStatus] = mapped_column(
        Enum(TenantStatus, native_enum=False),
        default=TenantStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    vacated_on: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    building: Mapped["Building"] = relationship(  # noqa: F821
        "Building",
        back_populates="tenants",
    )
    room: Mapped["Room"] = relationship("Room")  # noqa: F821
    payments: Mapped[list["Payment"]] = relationship(  # noqa: F821
        "Payment",
        back_populates="tenant",
        cascade="all, delete-orphan",
    )
    documents: Mapped[list["TenantDocument"]] = relationship(  # noqa: F821
        "TenantDocument",
        back_populates="tenant",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("idx_tenant_building_status", "building_id", "status"),)

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE

    @property
    def room_number(self) -> str | None:
        return self.room.room_number if self.room else None

    @property
    def monthly_total(self) -> Decimal:
        return (self.rent or Decimal("0")) + (self.maintenance or Decimal("0"))

    def __repr__(self) -> str:
        return (
            f"<Tenant(id={self.id}, name={self.name!r}, room_id={self.room_id}, "
            f"username={self.username!r}, status={self.status})>"
        )


__all__ = ["Tenant", "TenantStatus"]
