"""
Blob storage for task attachments.

One ``AttachmentStorage`` is built from settings when the projects app is
ready and is read-only afterwards. Services receive it explicitly.
"""
import logging
import mimetypes
import os
import uuid
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.files.storage import Storage, storages

from apps.logging.services import LoggerService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttachmentStorage:
    backend: Storage
    upload_prefix: str
    max_upload_size: int

    @classmethod
    def from_settings(cls) -> "AttachmentStorage":
        return cls(
            backend=storages["default"],
            upload_prefix=settings.ATTACHMENT_UPLOAD_PREFIX.strip("/"),
            max_upload_size=settings.ATTACHMENT_MAX_UPLOAD_SIZE,
        )

    def build_path(self, task_id, original_name: str) -> str:
        extension = os.path.splitext(original_name)[1].lower() or ".bin"
        return f"{self.upload_prefix}/task_{task_id}/{uuid.uuid4().hex}{extension}"

    def save(self, task_id, uploaded_file) -> str:
        """Store the blob and return the name the backend assigned to it."""
        path = self.build_path(task_id, uploaded_file.name)
        return self.backend.save(path, uploaded_file)

    def delete(self, name: str) -> bool:
        try:
            self.backend.delete(name)
            return True
        except Exception as e:
            logger.warning(f"Failed to delete attachment blob {name}: {str(e)}")
            LoggerService.log_error(
                action="attachment_blob_delete_failed",
                error=str(e),
                details={"blob": name},
                severity="low",
            )
            return False

    @staticmethod
    def guess_mime_type(uploaded_file) -> str:
        content_type = getattr(uploaded_file, "content_type", None)
        if content_type:
            return content_type
        guessed, _ = mimetypes.guess_type(uploaded_file.name)
        return guessed or "application/octet-stream"


_attachment_storage: Optional[AttachmentStorage] = None


def configure_attachment_storage(storage: Optional[AttachmentStorage] = None) -> AttachmentStorage:
    global _attachment_storage
    _attachment_storage = storage or AttachmentStorage.from_settings()
    return _attachment_storage


def get_attachment_storage() -> AttachmentStorage:
    if _attachment_storage is None:
        raise ImproperlyConfigured("Attachment storage has not been configured.")
    return _attachment_storage
