import pytest

from portal_hub.services.registry import WorkflowRegistry


class _SmallSettings:
    MAX_FILE_SIZE = 16
    SIGNED_URL_TTL = 120


async def _upload(client, headers, name="report.pdf", content=b"%PDF-1.7", content_type="application/pdf"):
    return await client.post("/docs", files={"file": (name, content, content_type)}, headers=headers)


@pytest.mark.asyncio
async def test_documents_require_login(client, gateway):
    resp = await client.get("/docs")

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Please log in to continue."
    assert gateway.records.calls == []


@pytest.mark.asyncio
async def test_upload_and_list(client, auth_headers, account):
    resp = await _upload(client, auth_headers)

    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "report.pdf"
    assert body["category"] == "pdf"
    assert body["storage_path"].startswith(f"{account.id}/")
    assert body["storage_path"].endswith("_report.pdf")

    listing = (await client.get("/docs", headers=auth_headers)).json()
    assert listing["total"] == 1
    assert listing["documents"][0]["id"] == body["id"]


@pytest.mark.asyncio
async def test_list_search(client, auth_headers):
    await _upload(client, auth_headers, name="Budget.xlsx", content_type="application/vnd.ms-excel")
    await _upload(client, auth_headers, name="photo.jpg", content_type="image/jpeg")

    resp = await client.get("/docs", params={"search": "budget"}, headers=auth_headers)

    body = resp.json()
    assert body["query"] == "budget"
    assert [d["name"] for d in body["documents"]] == ["Budget.xlsx"]
    assert body["documents"][0]["category"] == "spreadsheet"


@pytest.mark.asyncio
async def test_oversized_upload_returns_413(app, client, gateway, auth_headers):
    app.state.workflows = WorkflowRegistry(gateway, _SmallSettings())

    resp = await _upload(client, auth_headers, content=b"x" * 17)

    assert resp.status_code == 413
    assert gateway.blobs.calls == []
    assert gateway.records.calls == []


@pytest.mark.asyncio
async def test_orphaned_blob_is_reported(client, gateway, auth_headers):
    gateway.records.fail["insert"] = "permission denied"

    resp = await _upload(client, auth_headers)

    assert resp.status_code == 502
    body = resp.json()
    assert body["error"] == "OrphanedBlobError"
    assert body["operation"] == "upload"
    assert body["storage_path"] in gateway.blobs.objects


@pytest.mark.asyncio
async def test_rename(client, auth_headers):
    doc = (await _upload(client, auth_headers)).json()

    resp = await client.patch(f"/docs/{doc['id']}", json={"base_name": "final"}, headers=auth_headers)

    body = resp.json()
    assert body["renamed"] is True
    assert body["document"]["name"] == "final.pdf"
    assert body["document"]["storage_path"] == doc["storage_path"]

    resp = await client.patch(f"/docs/{doc['id']}", json={"base_name": "final"}, headers=auth_headers)
    assert resp.json()["renamed"] is False


@pytest.mark.asyncio
async def test_delete_requires_confirm(client, gateway, auth_headers):
    doc = (await _upload(client, auth_headers)).json()
    gateway.records.calls.clear()

    resp = await client.delete(f"/docs/{doc['id']}", headers=auth_headers)
    assert resp.status_code == 428
    assert gateway.records.calls == []

    resp = await client.delete(f"/docs/{doc['id']}", params={"confirm": "true"}, headers=auth_headers)
    assert resp.status_code == 200
    assert doc["storage_path"] not in gateway.blobs.objects
    assert (await client.get("/docs", headers=auth_headers)).json()["total"] == 0


@pytest.mark.asyncio
async def test_unknown_document_is_404(client, auth_headers):
    resp = await client.get("/docs/missing/view", headers=auth_headers)

    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_documents_are_scoped_to_owner(client, gateway, auth_headers, other_account):
    doc = (await _upload(client, auth_headers)).json()
    headers = {"Authorization": f"Bearer {gateway.identity.token_for(other_account)}"}

    assert (await client.get("/docs", headers=headers)).json()["total"] == 0
    assert (await client.get(f"/docs/{doc['id']}/download", headers=headers)).status_code == 404


@pytest.mark.asyncio
async def test_view_returns_signed_link(client, auth_headers):
    doc = (await _upload(client, auth_headers)).json()

    resp = await client.get(f"/docs/{doc['id']}/view", headers=auth_headers)

    body = resp.json()
    assert body["expires_in"] == 120
    assert doc["storage_path"] in body["url"]


@pytest.mark.asyncio
async def test_download(client, auth_headers):
    doc = (await _upload(client, auth_headers, name="notes.txt", content=b"hello", content_type="text/plain")).json()

    resp = await client.get(f"/docs/{doc['id']}/download", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.content == b"hello"
    assert 'filename="notes.txt"' in resp.headers["content-disposition"]


@pytest.mark.asyncio
async def test_list_failure_during_lookup_surfaces_gateway_text(client, gateway, auth_headers):
    doc = (await _upload(client, auth_headers)).json()
    gateway.records.fail["list"] = "connection refused"

    resp = await client.get(f"/docs/{doc['id']}/view", headers=auth_headers)

    assert resp.status_code == 502
    assert "connection refused" in resp.json()["detail"]
    assert "create_signed_url" not in gateway.blobs.names()
