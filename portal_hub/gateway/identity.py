from __future__ import annotations

import logging
import time

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from portal_hub.core.errors import GatewayError, InvalidCredentialsError
from portal_hub.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from portal_hub.gateway.base import Account, Identity, Session
from portal_hub.models.user import User

logger = logging.getLogger("portal-hub")


class SqlIdentity(Identity):
    """Accounts in the ``users`` table, sessions as signed JWTs.

    Sessions are not persisted: signing out records the token id in memory,
    so a restart ends every session anyway.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory
        # jti -> exp; entries are dropped once the token would have expired anyway
        self._revoked: dict[str, float] = {}

    async def resolve(self, token: str) -> Account | None:
        payload = decode_access_token(token)
        if not payload or payload.get("jti") in self._revoked:
            return None
        try:
            async with self._session_factory() as db:
                res = await db.execute(select(User).where(User.id == payload.get("sub")))
                user = res.scalars().first()
        except SQLAlchemyError as e:
            logger.warning("Account lookup failed: %s", e)
            return None
        if user is None:
            return None
        return Account(id=user.id, email=user.email)

    async def sign_in(self, email: str, password: str) -> Session:
        try:
            async with self._session_factory() as db:
                res = await db.execute(select(User).where(User.email == email))
                user = res.scalars().first()
        except SQLAlchemyError as e:
            raise GatewayError(f"Sign-in failed: {e}") from e

        if not user or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError("Invalid login credentials")

        token = create_access_token(data={"sub": user.id, "email": user.email})
        return Session(access_token=token, account=Account(id=user.id, email=user.email))

    async def sign_out(self, token: str) -> None:
        payload = decode_access_token(token)
        if payload and payload.get("jti"):
            self._prune_revoked()
            self._revoked[payload["jti"]] = float(payload.get("exp", 0))

    def _prune_revoked(self) -> None:
        now = time.time()
        for jti in [j for j, exp in self._revoked.items() if exp <= now]:
            del self._revoked[jti]

    async def update_password(self, account_id: str, new_password: str) -> None:
        try:
            async with self._session_factory() as db:
                res = await db.execute(select(User).where(User.id == account_id))
                user = res.scalars().first()
                if user is None:
                    raise GatewayError("User not found")
                user.hashed_password = get_password_hash(new_password)
                await db.commit()
        except SQLAlchemyError as e:
            raise GatewayError(f"Password update failed: {e}") from e

    async def ensure_account(self, email: str, password: str) -> Account:
        async with self._session_factory() as db:
            res = await db.execute(select(User).where(User.email == email))
            user = res.scalars().first()
            if user is None:
                user = User(email=email, hashed_password=get_password_hash(password))
                db.add(user)
                await db.commit()
                await db.refresh(user)
                logger.info("Seeded portal account %s", email)
            return Account(id=user.id, email=user.email)
