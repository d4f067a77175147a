from __future__ import annotations

from typing import Any

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import SQLAlchemyError

from portal_hub.core.errors import GatewayError, RecordNotFoundError
from portal_hub.gateway.base import RecordStore
from portal_hub.models import Document, Link, Memo

ENTITIES = {
    "docs": Document,
    "links": Link,
    "memos": Memo,
}


def _as_row(obj) -> dict[str, Any]:
    return {column.name: getattr(obj, column.name) for column in obj.__table__.columns}


class SqlRecordStore(RecordStore):
    def __init__(self, session_factory):
        self._session_factory = session_factory

    def _model(self, entity: str):
        try:
            return ENTITIES[entity]
        except KeyError:
            raise GatewayError(f"Unknown entity '{entity}'")

    async def list(self, entity: str, owner_id: str) -> list[dict[str, Any]]:
        model = self._model(entity)
        try:
            async with self._session_factory() as db:
                res = await db.execute(
                    select(model).where(model.owner_id == owner_id).order_by(model.created_at.desc())
                )
                return [_as_row(r) for r in res.scalars().all()]
        except SQLAlchemyError as e:
            raise GatewayError(str(e)) from e

    async def insert(self, entity: str, fields: dict[str, Any]) -> dict[str, Any]:
        model = self._model(entity)
        try:
            async with self._session_factory() as db:
                obj = model(**fields)
                db.add(obj)
                await db.commit()
                await db.refresh(obj)
                return _as_row(obj)
        except SQLAlchemyError as e:
            raise GatewayError(str(e)) from e

    async def update(self, entity: str, record_id: str, fields: dict[str, Any], owner_id: str) -> dict[str, Any]:
        model = self._model(entity)
        try:
            async with self._session_factory() as db:
                res = await db.execute(
                    select(model).where(and_(model.id == record_id, model.owner_id == owner_id))
                )
                obj = res.scalars().first()
                if obj is None:
                    raise RecordNotFoundError(f"{entity} record {record_id} not found")
                for key, value in fields.items():
                    setattr(obj, key, value)
                await db.commit()
                await db.refresh(obj)
                return _as_row(obj)
        except SQLAlchemyError as e:
            raise GatewayError(str(e)) from e

    async def delete(self, entity: str, record_id: str, owner_id: str) -> None:
        model = self._model(entity)
        try:
            async with self._session_factory() as db:
                res = await db.execute(
                    delete(model).where(and_(model.id == record_id, model.owner_id == owner_id))
                )
                await db.commit()
        except SQLAlchemyError as e:
            raise GatewayError(str(e)) from e
        if res.rowcount == 0:
            raise RecordNotFoundError(f"{entity} record {record_id} not found")
