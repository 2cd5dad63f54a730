"""Tenant document upload and removal.

Blob write and metadata insert are not transactional: when the insert fails
after a successful write, the blob is removed again.
"""

import logging
import time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.document import TenantDocument
from src.models.tenant import Tenant
from src.services.errors import ExternalServiceError, NotFoundError, ValidationError
from src.services.storage import LocalBlobStore, safe_file_name

logger = logging.getLogger(__name__)


class DocumentService:
    """Service for tenant document operations."""

    def __init__(self, db_session: Session, store: LocalBlobStore):
        """Initialize with database session and blob store."""
        self.db = db_session
        self.store = store

    def upload(
        self,
        tenant_id: int,
        file_name: str,
        content: bytes,
        label: str | None = None,
    ) -> TenantDocument:
        """Store a file for a tenant and record its metadata.

        Raises:
            NotFoundError: If tenant does not exist
            ValidationError: If the file is empty
            ExternalServiceError: If the blob store write fails
        """
        if not self.db.get(Tenant, tenant_id):
            raise NotFoundError("Tenant not found.")
        if not content:
            raise ValidationError("Please choose a file to upload.")

        original_name = file_name or "document"
        storage_path = f"{tenant_id}/{int(time.time() * 1000)}_{safe_file_name(original_name)}"

        try:
            self.store.put(storage_path, content)
        except OSError as e:
            logger.error(f"Upload of {storage_path} failed: {e}", exc_info=True)
            raise ExternalServiceError(f"File upload failed: {e}") from e

        document = TenantDocument(
            tenant_id=tenant_id,
            url=self.store.public_url(storage_path),
            file_name=original_name,
            label=(label or "").strip() or original_name,
            storage_path=storage_path,
        )
        self.db.add(document)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"Metadata insert failed, removing blob {storage_path}", exc_info=True)
            self.store.remove(storage_path)
            raise
        self.db.refresh(document)
        logger.info(f"Uploaded document {document.id} for tenant {tenant_id}: {document.label}")
        return document

    def list_documents(self, tenant_id: int) -> list[TenantDocument]:
        return (
            self.db.query(TenantDocument)
            .filter(TenantDocument.tenant_id == tenant_id)
            .order_by(TenantDocument.created_at.desc(), TenantDocument.id.desc())
            .all()
        )

    def get_document(self, document_id: int) -> TenantDocument:
        document = self.db.get(TenantDocument, document_id)
        if not document:
            raise NotFoundError("Document not found.")
        return document

    def delete_document(self, document_id: int) -> None:
        """Delete the metadata row, then the blob."""
        document = self.get_document(document_id)
        storage_path = document.storage_path
        self.db.delete(document)
        self.db.commit()
        try:
            self.store.remove(storage_path)
        except OSError as e:
            raise ExternalServiceError(f"Document record deleted but file removal failed: {e}") from e
        logger.info(f"Deleted document {document_id} ({storage_path})")

    def storage_paths_for_tenant(self, tenant_id: int) -> list[str]:
        return [document.storage_path for document in self.list_documents(tenant_id)]

    def remove_files(self, storage_paths: list[str]) -> None:
        """Remove blobs whose records are already gone (e.g. after deleting a tenant).

        Raises:
            ExternalServiceError: If any blob could not be removed
        """
        failed = []
        for path in storage_paths:
            try:
                self.store.remove(path)
            except OSError:
                logger.error(f"Could not remove blob {path}", exc_info=True)
                failed.append(path)
        if failed:
            raise ExternalServiceError(f"Records deleted but {len(failed)} file(s) could not be removed.")


__all__ = ["DocumentService"]
