from datetime import datetime

from pydantic import BaseModel, ConfigDict


class LinkInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    url: str
    owner_id: str
    created_at: datetime


class LinkWrite(BaseModel):
    title: str = ""
    url: str


class LinkListResponse(BaseModel):
    links: list[LinkInfo]
    total: int
    query: str = ""
