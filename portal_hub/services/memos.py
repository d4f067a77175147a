from __future__ import annotations

import logging

from portal_hub.core.errors import (
    AuthenticationRequiredError,
    ConfirmationRequiredError,
    GatewayError,
    RecordNotFoundError,
    ValidationError,
)
from portal_hub.gateway.base import Account, Gateway
from portal_hub.schemas.memo import MemoInfo

logger = logging.getLogger("portal-hub")

ENTITY = "memos"


class MemoWorkflow:
    """Notes with a master/detail cursor.

    ``selected`` is the memo open in the editor. ``save`` updates it when set
    and inserts a new memo otherwise.
    """

    def __init__(self, gateway: Gateway, account: Account | None):
        self.gateway = gateway
        self.account = account
        self.memos: list[MemoInfo] = []
        self.selected: MemoInfo | None = None

    async def _fetch(self) -> list[MemoInfo]:
        rows = await self.gateway.records.list(ENTITY, self.account.id)
        self.memos = [MemoInfo.model_validate(r) for r in rows]
        return self.memos

    async def refresh(self) -> list[MemoInfo]:
        if self.account is None:
            self.memos = []
            return self.memos
        try:
            return await self._fetch()
        except GatewayError as e:
            logger.warning("Error fetching memos for %s: %s", self.account.id, e)
            self.memos = []
            return self.memos

    def search(self, query: str) -> list[MemoInfo]:
        needle = (query or "").lower()
        return [
            m for m in self.memos
            if needle in (m.title or "").lower() or needle in (m.content or "").lower()
        ]

    async def get(self, memo_id: str) -> MemoInfo:
        if self.account is None:
            raise AuthenticationRequiredError()
        for memo in await self._fetch():
            if memo.id == memo_id:
                return memo
        raise RecordNotFoundError("Memo not found")

    def select(self, memo: MemoInfo) -> MemoInfo:
        self.selected = memo
        return memo

    def clear_selection(self) -> None:
        self.selected = None

    def start_new(self) -> None:
        self.selected = None

    async def save(self, title: str, content: str = "") -> MemoInfo:
        if not (title or "").strip():
            raise ValidationError("Please enter a title")
        content = content or ""

        if self.selected is not None:
            try:
                row = await self.gateway.records.update(
                    ENTITY, self.selected.id, {"title": title, "content": content}, self.selected.owner_id
                )
            except GatewayError as e:
                raise GatewayError(f"Update failed: {e.message}") from e
            await self.refresh()
            self.selected = self.selected.model_copy(update={"title": title, "content": content})
            return MemoInfo.model_validate(row)

        if self.account is None:
            raise AuthenticationRequiredError()
        try:
            row = await self.gateway.records.insert(
                ENTITY, {"title": title, "content": content, "owner_id": self.account.id}
            )
        except GatewayError as e:
            raise GatewayError(f"Insert failed: {e.message}") from e
        await self.refresh()
        return MemoInfo.model_validate(row)

    async def delete(self, memo: MemoInfo, confirmed: bool = False) -> None:
        if not confirmed:
            raise ConfirmationRequiredError("Delete memo?")
        try:
            await self.gateway.records.delete(ENTITY, memo.id, memo.owner_id)
        except GatewayError as e:
            raise GatewayError(f"Delete failed: {e.message}") from e
        if self.selected is not None and self.selected.id == memo.id:
            self.selected = None
        await self.refresh()
