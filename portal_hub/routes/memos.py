from fastapi import APIRouter, Depends, Query

from portal_hub.core.errors import ConfirmationRequiredError
from portal_hub.dependencies import get_memo_workflow
from portal_hub.schemas.memo import MemoInfo, MemoListResponse, MemoWrite, SelectionResponse
from portal_hub.services.memos import MemoWorkflow

router = APIRouter(prefix="/memos", tags=["Memos"])


@router.get("", response_model=MemoListResponse)
async def list_memos(
    search: str = Query("", description="Case-insensitive filter on title or content"),
    workflow: MemoWorkflow = Depends(get_memo_workflow),
):
    await workflow.refresh()
    memos = workflow.search(search)
    selected_id = workflow.selected.id if workflow.selected else None
    return MemoListResponse(memos=memos, total=len(memos), query=search, selected_id=selected_id)


@router.post("", response_model=MemoInfo)
async def save_memo(body: MemoWrite, workflow: MemoWorkflow = Depends(get_memo_workflow)):
    """Update the selected memo, or create a new one when nothing is selected."""
    return await workflow.save(body.title, body.content)


@router.get("/selection", response_model=SelectionResponse)
async def get_selection(workflow: MemoWorkflow = Depends(get_memo_workflow)):
    return SelectionResponse(selected=workflow.selected)


@router.put("/selection/{memo_id}", response_model=SelectionResponse)
async def select_memo(memo_id: str, workflow: MemoWorkflow = Depends(get_memo_workflow)):
    memo = await workflow.get(memo_id)
    return SelectionResponse(selected=workflow.select(memo))


@router.delete("/selection", response_model=SelectionResponse)
async def clear_selection(workflow: MemoWorkflow = Depends(get_memo_workflow)):
    workflow.clear_selection()
    return SelectionResponse(selected=None)


@router.delete("/{memo_id}")
async def delete_memo(
    memo_id: str,
    confirm: bool = Query(False),
    workflow: MemoWorkflow = Depends(get_memo_workflow),
):
    if not confirm:
        raise ConfirmationRequiredError("Delete memo?")
    memo = await workflow.get(memo_id)
    await workflow.delete(memo, confirmed=True)
    return {"status": "ok", "id": memo_id}
