from fastapi import APIRouter, Depends, Query

from portal_hub.core.errors import ConfirmationRequiredError
from portal_hub.dependencies import get_link_workflow
from portal_hub.schemas.link import LinkInfo, LinkListResponse, LinkWrite
from portal_hub.services.links import LinkWorkflow

router = APIRouter(prefix="/links", tags=["Links"])


@router.get("", response_model=LinkListResponse)
async def list_links(
    search: str = Query("", description="Case-insensitive filter on title or URL"),
    workflow: LinkWorkflow = Depends(get_link_workflow),
):
    await workflow.refresh()
    links = workflow.search(search)
    return LinkListResponse(links=links, total=len(links), query=search)


@router.post("", response_model=LinkInfo, status_code=201)
async def add_link(body: LinkWrite, workflow: LinkWorkflow = Depends(get_link_workflow)):
    return await workflow.add(body.title, body.url)


@router.put("/{link_id}", response_model=LinkInfo)
async def update_link(link_id: str, body: LinkWrite, workflow: LinkWorkflow = Depends(get_link_workflow)):
    link = await workflow.get(link_id)
    return await workflow.update(link, body.title, body.url)


@router.delete("/{link_id}")
async def delete_link(
    link_id: str,
    confirm: bool = Query(False),
    workflow: LinkWorkflow = Depends(get_link_workflow),
):
    if not confirm:
        raise ConfirmationRequiredError("Delete this link?")
    link = await workflow.get(link_id)
    await workflow.delete(link, confirmed=True)
    return {"status": "ok", "id": link_id}
