"""
Error taxonomy shared by the lifecycle and chat services.

Every error carries an HTTP status, a stable machine code and a human-readable
detail. The API layer renders them as {"detail": ..., "code": ...}.
"""


class ServiceError(Exception):
    status_code = 500
    code = "server_error"
    default_detail = "Server error"

    def __init__(self, detail=None, code=None):
        self.detail = detail or self.default_detail
        if code is not None:
            self.code = code
        super().__init__(self.detail)

    def as_dict(self):
        return {"detail": self.detail, "code": self.code}


class ValidationError(ServiceError):
    status_code = 400
    code = "validation_error"
    default_detail = "Invalid request"


class ConflictError(ServiceError):
    status_code = 409
    code = "conflict"
    default_detail = "Conflicting request"


class AuthorizationError(ServiceError):
    status_code = 403
    code = "forbidden"
    default_detail = "Access denied"


class NotFoundError(ServiceError):
    status_code = 404
    code = "not_found"
    default_detail = "Not found"


class StorageError(ServiceError):
    status_code = 500
    code = "server_error"
    default_detail = "Server error"


# Lifecycle kinds

class MissingDuration(ValidationError):
    code = "missing_duration"
    default_detail = "Membership duration is required for members"


class InvalidDuration(ValidationError):
    code = "invalid_duration"
    default_detail = "Invalid membership duration"


class AlreadyAffiliated(ConflictError):
    code = "already_affiliated"
    default_detail = "You are already in an organization"


class DuplicatePending(ConflictError):
    code = "duplicate_pending"
    default_detail = "You already have a pending request for this organization"


class AlreadyResolved(ConflictError):
    code = "already_resolved"
    default_detail = "Request has already been processed"


class NotAffiliated(AuthorizationError):
    code = "not_affiliated"
    default_detail = "You are not a member of this organization"
