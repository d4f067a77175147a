from __future__ import annotations

import logging
import urllib.parse

from fastapi import APIRouter, Depends, Query, UploadFile
from fastapi.responses import Response

from portal_hub.core.errors import ConfirmationRequiredError, FileTooLargeError
from portal_hub.dependencies import get_document_workflow
from portal_hub.schemas.document import (
    DocumentInfo,
    DocumentListResponse,
    DocumentView,
    RenameRequest,
    RenameResponse,
    SignedLinkResponse,
)
from portal_hub.services.documents import DocumentWorkflow, UploadedFile, classify

logger = logging.getLogger("portal-hub")

router = APIRouter(prefix="/docs", tags=["Documents"])


def _view(doc: DocumentInfo) -> DocumentView:
    return DocumentView(**doc.model_dump(), category=classify(doc.mime_type, doc.name))


def _rfc5987_filename(value: str) -> str:
    quoted = urllib.parse.quote(value, safe="")
    return f'filename="{value.encode("latin-1", "ignore").decode("latin-1")}"; filename*=UTF-8\'\'{quoted}'


async def _read_capped(file: UploadFile, limit: int) -> bytes:
    chunks = []
    total = 0
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise FileTooLargeError(total, limit)
        chunks.append(chunk)
    return b"".join(chunks)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    search: str = Query("", description="Case-insensitive filter on the document name"),
    workflow: DocumentWorkflow = Depends(get_document_workflow),
):
    await workflow.refresh()
    docs = workflow.search(search)
    return DocumentListResponse(documents=[_view(d) for d in docs], total=len(docs), query=search)


@router.post("", response_model=DocumentView, status_code=201)
async def upload_document(
    file: UploadFile,
    workflow: DocumentWorkflow = Depends(get_document_workflow),
):
    if file.size is not None and file.size > workflow.max_file_size:
        raise FileTooLargeError(file.size, workflow.max_file_size)
    content = await _read_capped(file, workflow.max_file_size)
    doc = await workflow.upload(
        UploadedFile(name=file.filename or "file.bin", content=content, content_type=file.content_type)
    )
    return _view(doc)


@router.patch("/{document_id}", response_model=RenameResponse)
async def rename_document(
    document_id: str,
    body: RenameRequest,
    workflow: DocumentWorkflow = Depends(get_document_workflow),
):
    doc = await workflow.get(document_id)
    renamed = await workflow.rename(doc, body.base_name)
    if renamed:
        doc = next((d for d in workflow.documents if d.id == document_id), doc)
    return RenameResponse(renamed=renamed, document=_view(doc))


@router.delete("/{document_id}")
async def delete_document(
    document_id: str,
    confirm: bool = Query(False, description="Must be true to delete"),
    workflow: DocumentWorkflow = Depends(get_document_workflow),
):
    if not confirm:
        raise ConfirmationRequiredError("Deleting a document requires confirm=true")
    doc = await workflow.get(document_id)
    await workflow.delete(doc, confirmed=confirm)
    return {"status": "ok", "id": document_id}


@router.get("/{document_id}/view", response_model=SignedLinkResponse)
async def view_document(
    document_id: str,
    workflow: DocumentWorkflow = Depends(get_document_workflow),
):
    doc = await workflow.get(document_id)
    url = await workflow.view(doc)
    return SignedLinkResponse(url=url, expires_in=workflow.signed_url_ttl)


@router.get("/{document_id}/download")
async def download_document(
    document_id: str,
    workflow: DocumentWorkflow = Depends(get_document_workflow),
):
    doc = await workflow.get(document_id)
    data = await workflow.download(doc)
    headers = {
        "Content-Disposition": f"attachment; {_rfc5987_filename(doc.name)}",
        "Cache-Control": "no-store",
    }
    return Response(content=data, media_type=doc.mime_type, headers=headers)
