from datetime import datetime

from pydantic import BaseModel, ConfigDict


class MemoInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str = ""
    owner_id: str
    created_at: datetime


class MemoWrite(BaseModel):
    title: str
    content: str = ""


class MemoListResponse(BaseModel):
    memos: list[MemoInfo]
    total: int
    query: str = ""
    selected_id: str | None = None


class SelectionResponse(BaseModel):
    selected: MemoInfo | None = None
