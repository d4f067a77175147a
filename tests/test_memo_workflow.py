import pytest

from portal_hub.core.errors import ConfirmationRequiredError, GatewayError, ValidationError
from portal_hub.services.memos import MemoWorkflow


@pytest.fixture
def workflow(gateway, account):
    return MemoWorkflow(gateway, account)


@pytest.mark.asyncio
async def test_save_without_selection_inserts(workflow, gateway):
    memo = await workflow.save("Groceries", "eggs, milk")

    assert memo.title == "Groceries"
    assert "insert" in gateway.records.names()
    assert workflow.selected is None


@pytest.mark.asyncio
async def test_save_with_blank_title_makes_no_call(workflow, gateway):
    with pytest.raises(ValidationError, match="Please enter a title"):
        await workflow.save("  ", "body")

    assert gateway.records.calls == []


@pytest.mark.asyncio
async def test_save_with_selection_updates_and_tracks_cursor(workflow, gateway):
    memo = await workflow.save("Draft", "")
    workflow.select(memo)

    await workflow.save("Final", "done")

    assert "update" in gateway.records.names()
    assert len(workflow.memos) == 1
    assert workflow.memos[0].title == "Final"
    assert workflow.selected.id == memo.id
    assert workflow.selected.content == "done"


@pytest.mark.asyncio
async def test_start_new_clears_cursor(workflow):
    memo = await workflow.save("One", "")
    workflow.select(memo)

    workflow.start_new()
    await workflow.save("Two", "")

    assert sorted(m.title for m in workflow.memos) == ["One", "Two"]


@pytest.mark.asyncio
async def test_deleting_selected_memo_clears_selection(workflow):
    memo = await workflow.save("Temp", "")
    workflow.select(memo)

    with pytest.raises(ConfirmationRequiredError):
        await workflow.delete(memo)
    assert workflow.selected is not None

    await workflow.delete(memo, confirmed=True)

    assert workflow.selected is None
    assert workflow.memos == []


@pytest.mark.asyncio
async def test_deleting_other_memo_keeps_selection(workflow):
    keep = await workflow.save("Keep", "")
    drop = await workflow.save("Drop", "")
    workflow.select(keep)

    await workflow.delete(drop, confirmed=True)

    assert workflow.selected.id == keep.id


@pytest.mark.asyncio
async def test_search_matches_title_or_content(workflow):
    await workflow.save("Trip", "pack the budget spreadsheet")
    await workflow.save("Budget", "")
    await workflow.save("Other", "")

    assert sorted(m.title for m in workflow.search("budget")) == ["Budget", "Trip"]


@pytest.mark.asyncio
async def test_get_raises_when_listing_fails(workflow, gateway):
    memo = await workflow.save("Note", "")
    gateway.records.fail["list"] = "timeout"

    with pytest.raises(GatewayError, match="timeout"):
        await workflow.get(memo.id)
