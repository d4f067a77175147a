from fastapi import Depends, Request

from portal_hub.core.security import get_current_account
from portal_hub.gateway.base import Account
from portal_hub.services.documents import DocumentWorkflow
from portal_hub.services.links import LinkWorkflow
from portal_hub.services.memos import MemoWorkflow
from portal_hub.services.registry import WorkflowRegistry


def get_registry(request: Request) -> WorkflowRegistry:
    return request.app.state.workflows


def get_document_workflow(
    account: Account = Depends(get_current_account),
    registry: WorkflowRegistry = Depends(get_registry),
) -> DocumentWorkflow:
    return registry.documents(account)


def get_link_workflow(
    account: Account = Depends(get_current_account),
    registry: WorkflowRegistry = Depends(get_registry),
) -> LinkWorkflow:
    return registry.links(account)


def get_memo_workflow(
    account: Account = Depends(get_current_account),
    registry: WorkflowRegistry = Depends(get_registry),
) -> MemoWorkflow:
    return registry.memos(account)
