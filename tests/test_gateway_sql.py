import time
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

import portal_hub.models  # noqa: F401
from portal_hub.core.database import Base
from portal_hub.core.errors import GatewayError, InvalidCredentialsError, RecordNotFoundError, ValidationError
from portal_hub.core.security import create_access_token, decode_access_token
from portal_hub.gateway.identity import SqlIdentity
from portal_hub.gateway.records import SqlRecordStore


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'gateway.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def identity(session_factory):
    return SqlIdentity(session_factory)


@pytest_asyncio.fixture
async def owner(identity):
    return await identity.ensure_account("owner@example.com", "s3cret")


@pytest.mark.asyncio
async def test_ensure_account_is_idempotent(identity, owner):
    again = await identity.ensure_account("owner@example.com", "other")

    assert again == owner


@pytest.mark.asyncio
async def test_sign_in_resolve_sign_out(identity, owner):
    session = await identity.sign_in("owner@example.com", "s3cret")

    assert session.account == owner
    assert await identity.resolve(session.access_token) == owner

    await identity.sign_out(session.access_token)
    assert await identity.resolve(session.access_token) is None


@pytest.mark.asyncio
async def test_sign_in_rejects_bad_password(identity, owner):
    with pytest.raises(InvalidCredentialsError):
        await identity.sign_in("owner@example.com", "nope")
    with pytest.raises(InvalidCredentialsError):
        await identity.sign_in("nobody@example.com", "s3cret")


@pytest.mark.asyncio
async def test_resolve_rejects_garbage_token(identity):
    assert await identity.resolve("not-a-jwt") is None


@pytest.mark.asyncio
async def test_update_password(identity, owner):
    await identity.update_password(owner.id, "changed")

    assert (await identity.sign_in("owner@example.com", "changed")).account == owner
    with pytest.raises(GatewayError):
        await identity.update_password("missing", "x")


@pytest.mark.asyncio
async def test_record_crud_is_owner_scoped(session_factory, identity, owner):
    other = await identity.ensure_account("other@example.com", "pw")
    store = SqlRecordStore(session_factory)

    older = await store.insert("links", {"title": "A", "url": "https://a", "owner_id": owner.id,
                                         "created_at": datetime(2026, 1, 1)})
    newer = await store.insert("links", {"title": "B", "url": "https://b", "owner_id": owner.id,
                                         "created_at": datetime(2026, 1, 2)})
    await store.insert("links", {"title": "C", "url": "https://c", "owner_id": other.id})

    rows = await store.list("links", owner.id)
    assert [r["id"] for r in rows] == [newer["id"], older["id"]]

    updated = await store.update("links", older["id"], {"title": "A2"}, owner.id)
    assert updated["title"] == "A2"
    with pytest.raises(RecordNotFoundError):
        await store.update("links", older["id"], {"title": "hijack"}, other.id)

    with pytest.raises(RecordNotFoundError):
        await store.delete("links", older["id"], other.id)
    assert len(await store.list("links", owner.id)) == 2

    await store.delete("links", older["id"], owner.id)
    assert [r["id"] for r in await store.list("links", owner.id)] == [newer["id"]]


@pytest.mark.asyncio
async def test_memo_content_defaults_to_empty(session_factory, owner):
    store = SqlRecordStore(session_factory)

    row = await store.insert("memos", {"title": "t", "owner_id": owner.id})

    assert row["content"] == ""


@pytest.mark.asyncio
async def test_duplicate_storage_path_is_a_gateway_error(session_factory, owner):
    store = SqlRecordStore(session_factory)
    fields = {"name": "a.txt", "storage_path": f"{owner.id}/1_a.txt", "size": 1,
              "mime_type": "text/plain", "owner_id": owner.id}
    await store.insert("docs", fields)

    with pytest.raises(GatewayError):
        await store.insert("docs", fields)


@pytest.mark.asyncio
async def test_unknown_entity(session_factory):
    with pytest.raises(GatewayError):
        await SqlRecordStore(session_factory).list("photos", "x")


@pytest.mark.asyncio
async def test_delete_of_missing_record_is_not_found(session_factory, owner):
    with pytest.raises(RecordNotFoundError):
        await SqlRecordStore(session_factory).delete("memos", "missing", owner.id)


@pytest.mark.asyncio
async def test_overlong_password_is_a_validation_error(identity, owner):
    with pytest.raises(ValidationError):
        await identity.update_password(owner.id, "x" * 80)
    with pytest.raises(ValidationError):
        await identity.ensure_account("long@example.com", "y" * 80)

    assert (await identity.sign_in("owner@example.com", "s3cret")).account == owner


@pytest.mark.asyncio
async def test_sign_out_prunes_expired_revocations(identity, owner):
    identity._revoked["stale"] = time.time() - 1
    session = await identity.sign_in("owner@example.com", "s3cret")

    await identity.sign_out(session.access_token)

    assert "stale" not in identity._revoked
    assert len(identity._revoked) == 1


def test_access_token_expiry_is_in_the_future():
    payload = decode_access_token(create_access_token({"sub": "someone"}, timedelta(minutes=5)))

    assert time.time() < payload["exp"] <= time.time() + 5 * 60 + 1
