"""Tenant document metadata ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class TenantDocument(Base, BaseModel):
    """Metadata of a file uploaded for a tenant (agreement, ID proof, ...).

    The binary lives in the blob store under storage_path; url is its public address.
    """

    __tablename__ = "tenant_documents"

    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(500), nullable=False)

    tenant: Mapped["Tenant"] = relationship(  # noqa: F821
        "Tenant",
        back_populates="documents",
    )

    def __repr__(self) -> str:
        return f"<TenantDocument(id={self.id}, tenant_id={self.tenant_id}, label={self.label!r})>"


__all__ = ["TenantDocument"]
