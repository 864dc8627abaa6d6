# attendance_api/core/security.py
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx
from jose import jwt, JWTError

from attendance_api.core.config import Settings
from attendance_api.core.exceptions import LookupFailure, Unauthorized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """What the identity service tells us about a caller."""

    user_id: Optional[str]
    role: Any
    scope_id: Any


def _claim(payload: dict, name: str):
    # app_metadata is server-controlled, so it wins over user_metadata
    for bag in ("app_metadata", "user_metadata"):
        value = (payload.get(bag) or {}).get(name)
        if value is not None:
            return value
    return payload.get(name)


def identity_from_claims(payload: dict) -> Identity:
    return Identity(
        user_id=payload.get("sub") or payload.get("id"),
        role=_claim(payload, "role"),
        scope_id=_claim(payload, "scope"),
    )


def create_access_token(data: dict, settings: Settings, expires_delta: timedelta | None = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=15))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict:
    """Decodes a JWT and returns its payload"""
    options = {"verify_aud": settings.JWT_AUDIENCE is not None}
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM],
                          audience=settings.JWT_AUDIENCE, options=options)
    except JWTError:
        raise Unauthorized("Could not validate credentials")


class JwtTokenVerifier:
    """Verifies tokens signed with the shared SECRET_KEY."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def verify(self, token: str) -> Identity:
        return identity_from_claims(decode_access_token(token, self.settings))


class RemoteTokenVerifier:
    """Asks the identity service who owns the token (GET /auth/v1/user)."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.url = settings.IDENTITY_URL.rstrip("/") + "/auth/v1/user"
        self.api_key = settings.IDENTITY_API_KEY
        self.timeout = httpx.Timeout(settings.IDENTITY_TIMEOUT)
        self.transport = transport

    async def verify(self, token: str) -> Identity:
        headers = {"Authorization": f"Bearer {token}"}
        if self.api_key:
            headers["apikey"] = self.api_key

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                resp = await client.get(self.url, headers=headers)
            except httpx.HTTPError as e:
                logger.error(f"Identity service unreachable: {e}")
                raise LookupFailure("Identity service unavailable") from e

        if resp.status_code in (401, 403):
            raise Unauthorized("Invalid token")
        if resp.status_code != 200:
            logger.error(f"Identity service error: {resp.status_code} - {resp.text}")
            raise LookupFailure("Identity service unavailable")

        try:
            user = resp.json()
        except ValueError as e:
            raise LookupFailure("Identity service returned invalid JSON") from e
        if not isinstance(user, dict) or not (user.get("id") or user.get("sub")):
            raise Unauthorized("Invalid token")
        return identity_from_claims(user)


def build_token_verifier(settings: Settings):
    if settings.IDENTITY_URL:
        return RemoteTokenVerifier(settings)
    return JwtTokenVerifier(settings)
