import pytest

from tests.conftest import PASSWORD


async def _login(client, email="owner@example.com", password=PASSWORD):
    return await client.post("/auth/token", data={"username": email, "password": password})


@pytest.mark.asyncio
async def test_login_me_logout(client, account):
    resp = await _login(client)
    assert resp.status_code == 200
    token = resp.json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    me = await client.get("/auth/me", headers=headers)
    assert me.json() == {"id": account.id, "email": account.email}

    assert (await client.post("/auth/logout", headers=headers)).status_code == 200
    assert (await client.get("/auth/me", headers=headers)).status_code == 401


@pytest.mark.asyncio
async def test_login_with_wrong_password(client, account):
    resp = await _login(client, password="wrong")

    assert resp.status_code == 401
    assert resp.json()["error"] == "InvalidCredentialsError"


@pytest.mark.asyncio
async def test_logout_without_token(client):
    assert (await client.post("/auth/logout")).status_code == 401


@pytest.mark.asyncio
async def test_change_password(client, gateway, auth_headers):
    resp = await client.post(
        "/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "a", "confirm_password": "b"},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Passwords do not match"

    resp = await client.post(
        "/auth/change-password",
        json={"current_password": "nope", "new_password": "fresh", "confirm_password": "fresh"},
        headers=auth_headers,
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Old password is incorrect."

    resp = await client.post(
        "/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "fresh", "confirm_password": "fresh"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert (await _login(client, password="fresh")).status_code == 200


@pytest.mark.asyncio
async def test_links_crud(client, gateway, auth_headers):
    resp = await client.post("/links", json={"url": "https://example.com"}, headers=auth_headers)
    assert resp.status_code == 201
    link = resp.json()
    assert link["title"] == "https://example.com"

    resp = await client.put(
        f"/links/{link['id']}", json={"title": "Example", "url": "https://example.org"}, headers=auth_headers
    )
    assert resp.json()["title"] == "Example"

    listing = (await client.get("/links", params={"search": "example.org"}, headers=auth_headers)).json()
    assert listing["total"] == 1

    assert (await client.delete(f"/links/{link['id']}", headers=auth_headers)).status_code == 428
    assert (await client.delete(f"/links/{link['id']}?confirm=true", headers=auth_headers)).status_code == 200
    assert (await client.get("/links", headers=auth_headers)).json()["total"] == 0


@pytest.mark.asyncio
async def test_link_without_url_is_rejected(client, gateway, auth_headers):
    resp = await client.post("/links", json={"title": "x", "url": ""}, headers=auth_headers)

    assert resp.status_code == 400
    assert "insert" not in gateway.records.names()


@pytest.mark.asyncio
async def test_memo_selection_flow(client, auth_headers):
    memo = (await client.post("/memos", json={"title": "Draft", "content": "v1"}, headers=auth_headers)).json()

    resp = await client.put(f"/memos/selection/{memo['id']}", headers=auth_headers)
    assert resp.json()["selected"]["id"] == memo["id"]

    saved = (await client.post("/memos", json={"title": "Draft", "content": "v2"}, headers=auth_headers)).json()
    assert saved["id"] == memo["id"]
    assert saved["content"] == "v2"

    listing = (await client.get("/memos", headers=auth_headers)).json()
    assert listing["total"] == 1
    assert listing["selected_id"] == memo["id"]

    resp = await client.delete(f"/memos/{memo['id']}", params={"confirm": "true"}, headers=auth_headers)
    assert resp.status_code == 200
    assert (await client.get("/memos/selection", headers=auth_headers)).json()["selected"] is None


@pytest.mark.asyncio
async def test_memo_without_title_is_rejected(client, auth_headers):
    resp = await client.post("/memos", json={"title": " ", "content": "x"}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please enter a title"


@pytest.mark.asyncio
async def test_clear_selection_then_save_creates(client, auth_headers):
    memo = (await client.post("/memos", json={"title": "One"}, headers=auth_headers)).json()
    await client.put(f"/memos/selection/{memo['id']}", headers=auth_headers)
    await client.delete("/memos/selection", headers=auth_headers)

    await client.post("/memos", json={"title": "Two"}, headers=auth_headers)

    assert (await client.get("/memos", headers=auth_headers)).json()["total"] == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("section,expected", [("docs", '"docs"'), ("bogus", '"links"'), ("SETTINGS", '"settings"')])
async def test_ui_section(client, section, expected):
    resp = await client.get("/ui", params={"section": section})

    assert resp.status_code == 200
    assert resp.headers["cache-control"] == "no-store"
    assert f"let section = {expected};" in resp.text
    assert "Maximum file size 50MB" in resp.text
