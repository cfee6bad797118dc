# =============================================================================
# core/services/company_profile_service.py - Company Profile Documents
# =============================================================================
# The downloadable company profile is a PDF in the company-profile-documents
# bucket plus a metadata row. Exactly one active document is "current"; the
# set_current_company_profile database function switches it.
# =============================================================================

import logging
import secrets
import time
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.db_errors import friendly_database_message
from lib.uploads import PDF_MIME_TYPES, ImageFile, validate_image
from core.models.content import CompanyProfileUpdate
from core.services.storage_service import StorageService
from app.config import settings
from app.exceptions import DatabaseError, NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

TABLE = "company_profile_documents"
BUCKET = "company-profile-documents"
FOLDER = "documents"


def document_filename(original: str, now: float | None = None, token: str | None = None) -> str:
    """
    Example:
        document_filename("Profile.pdf", now=1700000000.0, token="k3j9")
        # "company-profile-1700000000000-k3j9.pdf"
    """
    timestamp = int((now if now is not None else time.time()) * 1000)
    token = token or secrets.token_hex(6)
    ext = original.rsplit(".", 1)[-1].lower() if "." in original else "pdf"
    return f"company-profile-{timestamp}-{token}.{ext}"


class CompanyProfileService:
    """
    Service for company profile documents.
    """

    @staticmethod
    def _with_url(document: dict[str, Any]) -> dict[str, Any]:
        return {
            "document": document,
            "download_url": StorageService.get_public_url(BUCKET, document["file_path"]),
        }

    @staticmethod
    def get_current() -> dict[str, Any]:
        """
        The current active document and its download URL.

        Raises:
            NotFoundError: No current document
        """
        client = SupabaseClient.get_client()
        rows = (
            client.table(TABLE)
            .select("*")
            .eq("is_current", True)
            .eq("is_active", True)
            .limit(1)
            .execute()
        ).data or []
        if not rows:
            raise NotFoundError("Current company profile document", "current")
        return CompanyProfileService._with_url(rows[0])

    @staticmethod
    def get_document(document_id: str) -> dict[str, Any]:
        document = SupabaseClient.fetch_one(TABLE, "id", document_id)
        if not document:
            raise NotFoundError("Document", document_id)
        return CompanyProfileService._with_url(document)

    @staticmethod
    def list_documents() -> dict[str, Any]:
        """
        All documents, newest first, with the current one picked out.
        """
        client = SupabaseClient.get_client()
        documents = (
            client.table(TABLE)
            .select("*")
            .order("created_at", desc=True)
            .execute()
        ).data or []

        current = next(
            (doc for doc in documents if doc.get("is_current") and doc.get("is_active")),
            None,
        )
        return {"documents": documents, "total": len(documents), "current": current}

    @staticmethod
    def upload_document(
        file: ImageFile,
        title: str,
        description: str | None = None,
        version: str | None = None,
        is_active: bool = False,
        is_current: bool = False,
    ) -> dict[str, Any]:
        """
        Upload a new PDF and record it.

        If the metadata insert fails the uploaded file is removed again.

        Raises:
            ValidationFailedError: Missing title
            InvalidFileTypeError: Not a PDF
            FileTooLargeError: Over the document ceiling
            DatabaseError: Metadata insert failed
        """
        if not title or not title.strip():
            raise ValidationFailedError("Title is required", field="title")
        validate_image(file, settings.MAX_DOCUMENT_UPLOAD_MB, PDF_MIME_TYPES)

        filename = document_filename(file.filename)
        path = f"{FOLDER}/{filename}"
        StorageService.upload_bytes(BUCKET, path, file.content, file.content_type)

        data = {
            "filename": filename,
            "original_filename": file.filename,
            "file_path": path,
            "file_size": file.size,
            "mime_type": file.content_type,
            "title": title.strip(),
            "description": (description or "").strip() or None,
            "version": (version or "").strip() or "1.0",
            "is_active": is_active,
            "is_current": is_current,
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Database insert error, removing uploaded file: {e}")
            StorageService.delete_files(BUCKET, [path])
            raise DatabaseError("save document record", friendly_database_message(e))

        document = response.data[0]
        logger.info(f"Uploaded company profile document: {document['id']}")
        return {
            "document": document,
            "url": StorageService.get_public_url(BUCKET, path),
            "path": path,
        }

    @staticmethod
    def update_document(document_id: str, update: CompanyProfileUpdate) -> dict[str, Any]:
        """
        Edit document metadata.

        Raises:
            ValidationFailedError: Title sent but blank
            NotFoundError: No such document
        """
        data = update.model_dump(exclude_unset=True)
        if "title" in data:
            data["title"] = (data["title"] or "").strip()
            if not data["title"]:
                raise ValidationFailedError("Title cannot be empty", field="title")
        if "description" in data:
            data["description"] = (data["description"] or "").strip() or None
        if isinstance(data.get("version"), str):
            data["version"] = data["version"].strip()

        if not SupabaseClient.fetch_one(TABLE, "id", document_id, "id"):
            raise NotFoundError("Document", document_id)

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).update(data).eq("id", document_id).execute()
        except Exception as e:
            logger.error(f"Error updating document: {e}")
            raise DatabaseError("update document", friendly_database_message(e))

        logger.info(f"Updated company profile document: {document_id}")
        return response.data[0]

    @staticmethod
    def set_current(document_id: str) -> None:
        """
        Make a document the current one.

        Raises:
            ValidationFailedError: Document missing or inactive
        """
        try:
            switched = SupabaseClient.call_rpc(
                "set_current_company_profile",
                {"document_id": document_id},
            )
        except Exception as e:
            logger.error(f"Error setting current document: {e}")
            raise DatabaseError("set current document", friendly_database_message(e))

        if not switched:
            raise ValidationFailedError("Document not found or not active", field="id")
        logger.info(f"Set current company profile document: {document_id}")

    @staticmethod
    def delete_document(document_id: str) -> None:
        """
        Delete the row, then the file; a storage failure is only logged.
        """
        document = SupabaseClient.fetch_one(TABLE, "id", document_id)
        if not document:
            raise NotFoundError("Document", document_id)

        client = SupabaseClient.get_client()
        try:
            client.table(TABLE).delete().eq("id", document_id).execute()
        except Exception as e:
            logger.error(f"Error deleting document from database: {e}")
            raise DatabaseError("delete document record", friendly_database_message(e))

        if not StorageService.delete_files(BUCKET, [document["file_path"]]):
            logger.warning(f"Failed to delete file from storage: {document['file_path']}")

        logger.info(f"Deleted company profile document: {document_id}")
