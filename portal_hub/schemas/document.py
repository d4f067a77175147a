from datetime import datetime

from pydantic import BaseModel, ConfigDict


class DocumentInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    storage_path: str
    size: int
    mime_type: str
    owner_id: str
    created_at: datetime


class DocumentView(DocumentInfo):
    category: str


class DocumentListResponse(BaseModel):
    documents: list[DocumentView]
    total: int
    query: str = ""


class RenameRequest(BaseModel):
    base_name: str


class RenameResponse(BaseModel):
    renamed: bool
    document: DocumentView


class SignedLinkResponse(BaseModel):
    url: str
    expires_in: int
