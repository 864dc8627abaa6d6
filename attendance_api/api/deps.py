# attendance_api/api/deps.py
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from attendance_api.core.config import Settings
from attendance_api.core.exceptions import Unauthorized
from attendance_api.crud.classes import SqlClassLookup
from attendance_api.services.scope import ScopeGrant, ScopeResolver

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request):
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_current_grant(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> ScopeGrant:
    """Bearer token -> validated ScopeGrant. 401 without a usable token."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Missing bearer token")
    identity = await request.app.state.token_verifier.verify(credentials.credentials)
    return ScopeGrant.from_claims(identity.role, identity.scope_id, identity.user_id)


def get_scope_resolver(db: Session = Depends(get_db)) -> ScopeResolver:
    return ScopeResolver(SqlClassLookup(db))


def get_session_locks(request: Request):
    return request.app.state.session_locks
