from __future__ import annotations

from portal_hub.core.config import settings as default_settings
from portal_hub.gateway.base import Account, Gateway
from portal_hub.services.documents import DocumentWorkflow
from portal_hub.services.links import LinkWorkflow
from portal_hub.services.memos import MemoWorkflow


class WorkflowRegistry:
    """One workflow per account and section, so per-surface state
    (the upload busy flag, the memo cursor) outlives a single request."""

    def __init__(self, gateway: Gateway, settings=default_settings):
        self.gateway = gateway
        self.settings = settings
        self._documents: dict[str, DocumentWorkflow] = {}
        self._links: dict[str, LinkWorkflow] = {}
        self._memos: dict[str, MemoWorkflow] = {}

    def documents(self, account: Account) -> DocumentWorkflow:
        wf = self._documents.get(account.id)
        if wf is None:
            wf = DocumentWorkflow(self.gateway, account, settings=self.settings)
            self._documents[account.id] = wf
        return wf

    def links(self, account: Account) -> LinkWorkflow:
        wf = self._links.get(account.id)
        if wf is None:
            wf = LinkWorkflow(self.gateway, account)
            self._links[account.id] = wf
        return wf

    def memos(self, account: Account) -> MemoWorkflow:
        wf = self._memos.get(account.id)
        if wf is None:
            wf = MemoWorkflow(self.gateway, account)
            self._memos[account.id] = wf
        return wf
