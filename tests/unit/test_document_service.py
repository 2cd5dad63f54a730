"""Tests for tenant document upload and the local blob store."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from src.services.document_service import DocumentService
from src.services.errors import ExternalServiceError, NotFoundError, ValidationError
from src.services.storage import LocalBlobStore, safe_file_name


class TestLocalBlobStore:
    def test_put_exists_remove(self, store) -> None:
        store.put("7/a.pdf", b"data")

        assert store.exists("7/a.pdf")
        assert (store.root / "7" / "a.pdf").read_bytes() == b"data"

        store.remove("7/a.pdf")
        store.remove("7/a.pdf")
        assert not store.exists("7/a.pdf")

    def test_public_url(self) -> None:
        assert LocalBlobStore("/tmp/x", "http://host/files/").public_url("1/a.pdf") == (
            "http://host/files/1/a.pdf"
        )

    def test_rejects_paths_outside_root(self, store) -> None:
        with pytest.raises(ValueError):
            store.put("../escape.txt", b"x")

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("lease agreement.pdf", "lease_agreement.pdf"),
            ("../../etc/passwd", "passwd"),
            ("", "document"),
        ],
    )
    def test_safe_file_name(self, name, expected) -> None:
        assert safe_file_name(name) == expected


class TestDocumentService:
    @pytest.fixture
    def tenant(self, make_tenant):
        return make_tenant().tenant

    def test_upload_stores_blob_and_metadata(self, db_session, store, tenant) -> None:
        service = DocumentService(db_session, store)

        document = service.upload(tenant.id, "Lease 2024.pdf", b"%PDF", label="Agreement")

        assert document.label == "Agreement"
        assert document.file_name == "Lease 2024.pdf"
        assert document.storage_path.startswith(f"{tenant.id}/")
        assert document.storage_path.endswith("_Lease_2024.pdf")
        assert document.url == f"http://testserver/files/{document.storage_path}"
        assert store.exists(document.storage_path)

    def test_label_defaults_to_file_name(self, db_session, store, tenant) -> None:
        document = DocumentService(db_session, store).upload(tenant.id, "id.png", b"png")

        assert document.label == "id.png"

    def test_empty_file_rejected(self, db_session, store, tenant) -> None:
        with pytest.raises(ValidationError, match="choose a file"):
            DocumentService(db_session, store).upload(tenant.id, "a.pdf", b"")

    def test_unknown_tenant(self, db_session, store) -> None:
        with pytest.raises(NotFoundError):
            DocumentService(db_session, store).upload(99, "a.pdf", b"x")

    def test_storage_failure_is_external_error(self, db_session, store, tenant) -> None:
        with patch.object(store, "put", side_effect=OSError("disk full")):
            with pytest.raises(ExternalServiceError, match="File upload failed"):
                DocumentService(db_session, store).upload(tenant.id, "a.pdf", b"x")

    def test_failed_insert_removes_blob(self, db_session, store, tenant) -> None:
        service = DocumentService(db_session, store)
        written = []
        original_put = store.put

        def tracking_put(path, content):
            written.append(path)
            original_put(path, content)

        with patch.object(store, "put", side_effect=tracking_put), patch.object(
            db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("db down"))
        ):
            with pytest.raises(OperationalError):
                service.upload(tenant.id, "a.pdf", b"x")

        assert len(written) == 1
        assert not store.exists(written[0])

    def test_list_and_delete(self, db_session, store, tenant) -> None:
        service = DocumentService(db_session, store)
        first = service.upload(tenant.id, "a.pdf", b"a")
        second = service.upload(tenant.id, "b.pdf", b"b")

        assert [d.id for d in service.list_documents(tenant.id)] == [second.id, first.id]

        service.delete_document(first.id)

        assert [d.id for d in service.list_documents(tenant.id)] == [second.id]
        assert not store.exists(first.storage_path)
        with pytest.raises(NotFoundError):
            service.get_document(first.id)

    def test_storage_paths_and_remove_files(self, db_session, store, tenant) -> None:
        service = DocumentService(db_session, store)
        document = service.upload(tenant.id, "a.pdf", b"a")

        paths = service.storage_paths_for_tenant(tenant.id)
        service.remove_files(paths)

        assert paths == [document.storage_path]
        assert not store.exists(document.storage_path)

    def test_remove_files_reports_failures(self, db_session, store, tenant) -> None:
        service = DocumentService(db_session, store)
        document = service.upload(tenant.id, "a.pdf", b"a")

        with patch.object(store, "remove", side_effect=OSError("read-only")):
            with pytest.raises(ExternalServiceError, match="1 file"):
                service.remove_files([document.storage_path])
