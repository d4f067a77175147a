import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from portal_hub.core.config import settings
from portal_hub.core.errors import AuthenticationRequiredError, ValidationError
from portal_hub.gateway.base import Account, Gateway

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

# bcrypt only reads this many bytes and 5.x rejects anything longer
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def get_password_hash(password: str) -> str:
    if password_too_long(password):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        return None


def get_gateway(request: Request) -> Gateway:
    return request.app.state.gateway


async def get_optional_account(
    token: str | None = Depends(oauth2_scheme),
    gateway: Gateway = Depends(get_gateway),
) -> Account | None:
    if not token:
        return None
    return await gateway.identity.resolve(token)


async def get_current_account(account: Account | None = Depends(get_optional_account)) -> Account:
    if account is None:
        raise AuthenticationRequiredError()
    return account
