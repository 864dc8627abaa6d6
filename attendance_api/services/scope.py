# attendance_api/services/scope.py
"""Role hierarchy and the class ids each role may read.

super_admin sees everything; state, branch and classroom admins see the
classes under their main branch, sub-branch or classroom; a class_admin
sees exactly one class.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Protocol, Union

from attendance_api.core.exceptions import (
    ForbiddenRole,
    InvalidParameter,
    LookupFailure,
    MissingScope,
    ScopeViolation,
)

logger = logging.getLogger(__name__)

ALL = "all"

AllowedClasses = Union[str, FrozenSet[int]]


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    STATE_ADMIN = "state_admin"
    BRANCH_ADMIN = "branch_admin"
    CLASSROOM_ADMIN = "classroom_admin"
    CLASS_ADMIN = "class_admin"


class ScopeType(str, Enum):
    NONE = "none"
    MAIN_BRANCH = "main_branch"
    SUB_BRANCH = "sub_branch"
    CLASSROOM = "classroom"
    CLASS = "class"


ROLE_SCOPES = {
    Role.SUPER_ADMIN: ScopeType.NONE,
    Role.STATE_ADMIN: ScopeType.MAIN_BRANCH,
    Role.BRANCH_ADMIN: ScopeType.SUB_BRANCH,
    Role.CLASSROOM_ADMIN: ScopeType.CLASSROOM,
    Role.CLASS_ADMIN: ScopeType.CLASS,
}


def _parse_scope_id(role: Role, scope) -> int:
    if scope is None or (isinstance(scope, str) and not scope.strip()):
        raise MissingScope(f"Missing scope for {role.value} role")
    if isinstance(scope, bool):
        raise MissingScope(f"Invalid scope for {role.value} role")
    text = str(scope).strip()
    try:
        return int(text)
    except ValueError:
        pass
    # numeric claims may arrive as 42.0
    try:
        number = float(text)
        if number.is_integer():
            return int(number)
    except ValueError:
        pass
    raise MissingScope(f"Invalid scope for {role.value} role: {scope!r}")


@dataclass(frozen=True)
class ScopeGrant:
    role: Role
    scope_type: ScopeType
    scope_id: Optional[int] = None
    user_id: Optional[str] = None

    @classmethod
    def from_claims(cls, role, scope=None, user_id=None) -> "ScopeGrant":
        """Validates an identity-service role/scope pair once, at the auth boundary."""
        try:
            role = Role(role)
        except ValueError:
            raise ForbiddenRole(f"Role {role!r} may not read attendance reports")
        scope_type = ROLE_SCOPES[role]
        scope_id = None
        if scope_type != ScopeType.NONE:
            scope_id = _parse_scope_id(role, scope)
        return cls(role=role, scope_type=scope_type, scope_id=scope_id,
                   user_id=str(user_id) if user_id is not None else None)


class ClassLookup(Protocol):
    def class_ids_by(self, scope_type: ScopeType, scope_id: int) -> Iterable[int]:
        ...


class ScopeResolver:
    def __init__(self, class_lookup: ClassLookup):
        self.class_lookup = class_lookup

    def resolve(self, grant: ScopeGrant) -> AllowedClasses:
        """Returns ALL or the (possibly empty) set of readable class ids."""
        if not isinstance(grant.role, Role):
            raise ForbiddenRole(f"Unknown role {grant.role!r}")
        if grant.role == Role.SUPER_ADMIN:
            return ALL
        if grant.scope_id is None:
            raise MissingScope(f"Missing scope for {grant.role.value} role")
        if grant.role == Role.CLASS_ADMIN:
            return frozenset({grant.scope_id})

        try:
            allowed = frozenset(int(i) for i in self.class_lookup.class_ids_by(
                ROLE_SCOPES[grant.role], grant.scope_id))
        except LookupFailure:
            logger.exception(f"Failed to resolve scope for {grant.role.value}={grant.scope_id}")
            raise
        logger.info(f"Resolved {grant.role.value} scope {grant.scope_id} to {len(allowed)} class(es)")
        return allowed

    def authorize(self, grant: ScopeGrant, requested=None) -> AllowedClasses:
        allowed = self.resolve(grant)
        check_class(allowed, requested)
        return allowed


def parse_class_id(requested) -> Optional[int]:
    """None for "all"/absent, otherwise the numeric class id."""
    if requested is None:
        return None
    if isinstance(requested, int) and not isinstance(requested, bool):
        return requested
    text = str(requested).strip()
    if not text or text.lower() == ALL:
        return None
    try:
        return int(text)
    except ValueError:
        raise InvalidParameter(f"classId must be a number or 'all', got {requested!r}")


def check_class(allowed: AllowedClasses, requested) -> None:
    class_id = parse_class_id(requested)
    if class_id is None or allowed == ALL:
        return
    if class_id not in allowed:
        raise ScopeViolation(f"Access denied to class {class_id}")


def effective_class_ids(allowed: AllowedClasses, requested=None) -> Optional[FrozenSet[int]]:
    """Class ids to filter the fetch by; None means unfiltered."""
    check_class(allowed, requested)
    class_id = parse_class_id(requested)
    if class_id is not None:
        return frozenset({class_id})
    if allowed == ALL:
        return None
    return allowed
