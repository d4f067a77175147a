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
from portal_hub.schemas.link import LinkInfo

logger = logging.getLogger("portal-hub")

ENTITY = "links"


class LinkWorkflow:
    """Bookmarks: plain CRUD over the ``links`` entity, re-fetched after every change."""

    def __init__(self, gateway: Gateway, account: Account | None):
        self.gateway = gateway
        self.account = account
        self.links: list[LinkInfo] = []

    def _require_account(self) -> Account:
        if self.account is None:
            raise AuthenticationRequiredError()
        return self.account

    async def _fetch(self) -> list[LinkInfo]:
        rows = await self.gateway.records.list(ENTITY, self.account.id)
        self.links = [LinkInfo.model_validate(r) for r in rows]
        return self.links

    async def refresh(self) -> list[LinkInfo]:
        if self.account is None:
            self.links = []
            return self.links
        try:
            return await self._fetch()
        except GatewayError as e:
            logger.warning("Listing links failed for %s: %s", self.account.id, e)
            self.links = []
            return self.links

    def search(self, query: str) -> list[LinkInfo]:
        needle = (query or "").lower()
        return [
            l for l in self.links
            if needle in (l.title or "").lower() or needle in (l.url or "").lower()
        ]

    async def get(self, link_id: str) -> LinkInfo:
        self._require_account()
        for link in await self._fetch():
            if link.id == link_id:
                return link
        raise RecordNotFoundError("Link not found")

    @staticmethod
    def _fields(title: str, url: str) -> dict:
        url = (url or "").strip()
        if not url:
            raise ValidationError("A URL is required.")
        return {"title": (title or "").strip() or url, "url": url}

    async def add(self, title: str, url: str) -> LinkInfo:
        fields = self._fields(title, url)
        account = self._require_account()
        try:
            row = await self.gateway.records.insert(ENTITY, {**fields, "owner_id": account.id})
        except GatewayError as e:
            raise GatewayError(f"Insert failed: {e.message}") from e
        await self.refresh()
        return LinkInfo.model_validate(row)

    async def update(self, link: LinkInfo, title: str, url: str) -> LinkInfo:
        fields = self._fields(title, url)
        try:
            row = await self.gateway.records.update(ENTITY, link.id, fields, link.owner_id)
        except GatewayError as e:
            raise GatewayError(f"Update failed: {e.message}") from e
        await self.refresh()
        return LinkInfo.model_validate(row)

    async def delete(self, link: LinkInfo, confirmed: bool = False) -> None:
        if not confirmed:
            raise ConfirmationRequiredError("Delete this link?")
        try:
            await self.gateway.records.delete(ENTITY, link.id, link.owner_id)
        except GatewayError as e:
            raise GatewayError(f"Delete failed: {e.message}") from e
        await self.refresh()
