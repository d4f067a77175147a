"""Document registry: keeps each uploaded blob and its ``docs`` record together.

Both multi-step operations touch the blob first. Upload writes the blob and
then inserts the record; delete removes the blob and then the record. When the
second step fails the stores disagree, and the workflow raises a named partial
failure instead of trying to repair it.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from portal_hub.core.config import settings as default_settings
from portal_hub.core.errors import (
    AuthenticationRequiredError,
    ConfirmationRequiredError,
    DanglingRecordError,
    FileTooLargeError,
    GatewayError,
    OrphanedBlobError,
    RecordNotFoundError,
    UploadInProgressError,
)
from portal_hub.gateway.base import Account, Gateway
from portal_hub.monitoring.setup import report_document_operation, report_partial_failure
from portal_hub.schemas.document import DocumentInfo

logger = logging.getLogger("portal-hub")

ENTITY = "docs"
DEFAULT_MIME_TYPE = "application/octet-stream"

CATEGORIES = (
    "image", "pdf", "word", "spreadsheet", "presentation",
    "plain-text", "archive", "audio", "video", "generic",
)

# (category, mime prefixes, mime substrings, extensions); order is precedence
_CLASSIFIERS = (
    ("image", ("image/",), (), ()),
    ("pdf", (), ("application/pdf",), ("pdf",)),
    ("word", (), ("word", "officedocument.wordprocessingml"), ("doc", "docx")),
    ("spreadsheet", (), ("excel", "spreadsheetml", "csv"), ("xls", "xlsx", "csv")),
    ("presentation", (), ("powerpoint", "presentationml"), ("ppt", "pptx")),
    ("plain-text", ("text/",), (), ("txt", "log")),
    ("archive", (), ("zip", "compressed"), ("zip", "rar", "7z", "tar", "gz")),
    ("audio", ("audio/",), (), ("mp3", "wav", "ogg", "m4a")),
    ("video", ("video/",), (), ("mp4", "mov", "avi", "mkv")),
)


def classify(mime_type: str | None, name: str | None) -> str:
    """Display category for a document, used only to pick an icon."""
    mime = (mime_type or "").lower()
    extension = (name or "").rsplit(".", 1)[-1].lower()
    for category, prefixes, substrings, extensions in _CLASSIFIERS:
        if any(mime.startswith(p) for p in prefixes) or any(s in mime for s in substrings):
            return category
        if extension in extensions:
            return category
    return "generic"


def split_name(name: str) -> tuple[str, str]:
    """Split ``name`` into (base, extension) at the last dot.

    A leading dot or no dot at all means the whole name is the base.
    """
    idx = name.rfind(".")
    if idx > 0:
        return name[:idx], name[idx:]
    return name, ""


def search_by_name(documents: list[DocumentInfo], query: str) -> list[DocumentInfo]:
    needle = (query or "").lower()
    return [d for d in documents if needle in (d.name or "").lower()]


def storage_path_for(owner_id: str, file_name: str, epoch_millis: int) -> str:
    return f"{owner_id}/{epoch_millis}_{file_name}"


def _epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class UploadedFile:
    name: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


class DocumentWorkflow:
    def __init__(
        self,
        gateway: Gateway,
        account: Account | None,
        settings=default_settings,
        clock: Callable[[], int] = _epoch_millis,
    ):
        self.gateway = gateway
        self.account = account
        self.max_file_size = settings.MAX_FILE_SIZE
        self.signed_url_ttl = settings.SIGNED_URL_TTL
        self._clock = clock
        self.documents: list[DocumentInfo] = []
        self.uploading = False

    async def _fetch(self) -> list[DocumentInfo]:
        rows = await self.gateway.records.list(ENTITY, self.account.id)
        self.documents = [DocumentInfo.model_validate(r) for r in rows]
        return self.documents

    async def refresh(self) -> list[DocumentInfo]:
        if self.account is None:
            self.documents = []
            return self.documents
        try:
            return await self._fetch()
        except GatewayError as e:
            logger.warning("Listing documents failed for %s: %s", self.account.id, e)
            self.documents = []
            return self.documents

    def search(self, query: str) -> list[DocumentInfo]:
        return search_by_name(self.documents, query)

    async def get(self, document_id: str) -> DocumentInfo:
        """Look up one owned document. Unlike refresh, a list failure is raised."""
        if self.account is None:
            raise AuthenticationRequiredError()
        for doc in await self._fetch():
            if doc.id == document_id:
                return doc
        raise RecordNotFoundError("Document not found")

    async def upload(self, file: UploadedFile) -> DocumentInfo:
        if file.size > self.max_file_size:
            raise FileTooLargeError(file.size, self.max_file_size)
        if self.account is None:
            raise AuthenticationRequiredError("Please log in to upload files.")
        if self.uploading:
            raise UploadInProgressError()

        self.uploading = True
        try:
            return await self._upload(file, self.account)
        finally:
            self.uploading = False

    async def _upload(self, file: UploadedFile, account: Account) -> DocumentInfo:
        storage_path = storage_path_for(account.id, file.name, self._clock())
        mime_type = file.content_type or DEFAULT_MIME_TYPE

        try:
            await self.gateway.blobs.upload(storage_path, file.content, mime_type)
        except GatewayError as e:
            report_document_operation("upload", "failed")
            raise GatewayError(f"Upload failed: {e.message}") from e

        try:
            row = await self.gateway.records.insert(ENTITY, {
                "name": file.name,
                "storage_path": storage_path,
                "size": file.size,
                "mime_type": mime_type,
                "owner_id": account.id,
            })
        except GatewayError as e:
            report_partial_failure("upload")
            logger.error("Record insert failed after blob write, orphaned blob at %s: %s", storage_path, e)
            raise OrphanedBlobError(f"Upload failed: {e.message}", storage_path) from e

        report_document_operation("upload", "ok")
        logger.info("Uploaded %s (%s bytes) to %s", file.name, file.size, storage_path)
        await self.refresh()
        return DocumentInfo.model_validate(row)

    async def rename(self, document: DocumentInfo, new_base_name: str) -> bool:
        """Rename the display name, keeping the extension. Returns False on a no-op."""
        base = (new_base_name or "").strip()
        if not base:
            return False
        _, extension = split_name(document.name)
        full_name = base + extension
        if full_name == document.name:
            return False

        try:
            await self.gateway.records.update(ENTITY, document.id, {"name": full_name}, document.owner_id)
        except GatewayError as e:
            report_document_operation("rename", "failed")
            raise GatewayError(f"Rename failed: {e.message}") from e

        report_document_operation("rename", "ok")
        await self.refresh()
        return True

    async def delete(self, document: DocumentInfo, confirmed: bool = False) -> None:
        if not confirmed:
            raise ConfirmationRequiredError(f"Permanently delete {document.name}?")

        try:
            await self.gateway.blobs.remove([document.storage_path])
        except GatewayError as e:
            report_document_operation("delete", "failed")
            raise GatewayError(f"Delete failed: {e.message}") from e

        try:
            await self.gateway.records.delete(ENTITY, document.id, document.owner_id)
        except GatewayError as e:
            report_partial_failure("delete")
            logger.error("Record delete failed after blob removal, dangling record %s: %s", document.id, e)
            raise DanglingRecordError(f"Delete failed: {e.message}", document.storage_path) from e

        report_document_operation("delete", "ok")
        await self.refresh()

    async def view(self, document: DocumentInfo) -> str:
        try:
            return await self.gateway.blobs.create_signed_url(document.storage_path, self.signed_url_ttl)
        except GatewayError as e:
            raise GatewayError(f"View failed: {e.message}") from e

    async def download(self, document: DocumentInfo) -> bytes:
        try:
            return await self.gateway.blobs.download(document.storage_path)
        except GatewayError as e:
            raise GatewayError(f"Download failed: {e.message}") from e
