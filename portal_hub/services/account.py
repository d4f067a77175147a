from __future__ import annotations

import logging

from portal_hub.core.errors import (
    AuthenticationRequiredError,
    InvalidCredentialsError,
    ValidationError,
)
from portal_hub.core.security import MAX_PASSWORD_BYTES, password_too_long
from portal_hub.gateway.base import Account, Gateway, Session

logger = logging.getLogger("portal-hub")


class AccountWorkflow:
    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    async def sign_in(self, email: str, password: str) -> Session:
        session = await self.gateway.identity.sign_in(email, password)
        logger.info("Signed in %s", session.account.email)
        return session

    async def sign_out(self, token: str) -> None:
        await self.gateway.identity.sign_out(token)

    async def change_password(
        self,
        account: Account | None,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> None:
        if account is None:
            raise AuthenticationRequiredError()
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match")
        if not new_password:
            raise ValidationError("New password must not be empty")
        if password_too_long(new_password):
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")

        try:
            await self.gateway.identity.sign_in(account.email, current_password)
        except InvalidCredentialsError:
            raise InvalidCredentialsError("Old password is incorrect.")

        await self.gateway.identity.update_password(account.id, new_password)
        logger.info("Password updated for %s", account.email)
