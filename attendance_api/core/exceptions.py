# attendance_api/core/exceptions.py


class AttendanceError(Exception):
    """Base error; `code` is the machine-readable value returned to callers."""

    code = "internal_error"
    status_code = 500


class InvalidStatus(AttendanceError):
    """A stored status code is outside 0..4. Treat as corrupt data."""

    code = "invalid_status"
    status_code = 500


class Unauthorized(AttendanceError):
    code = "unauthorized"
    status_code = 401


class AuthorizationError(AttendanceError):
    status_code = 403


class ForbiddenRole(AuthorizationError):
    code = "forbidden_role"


class MissingScope(AuthorizationError):
    code = "missing_scope"


class ScopeViolation(AuthorizationError):
    code = "scope_violation"


class InvalidParameter(AttendanceError):
    code = "invalid_parameter"
    status_code = 400


class InvalidRange(InvalidParameter):
    code = "invalid_range"


class LookupFailure(AttendanceError):
    """The record store or identity service could not be reached."""

    code = "lookup_failure"
    status_code = 500


class NotFound(AttendanceError):
    code = "not_found"
    status_code = 404
