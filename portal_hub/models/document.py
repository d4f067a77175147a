import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from portal_hub.core.database import Base


class Document(Base):
    __tablename__ = "docs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False, index=True)
    storage_path = Column(String, nullable=False, unique=True)
    size = Column(Integer, nullable=False)
    mime_type = Column(String, nullable=False, default="application/octet-stream")
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
