"""
Service-layer exceptions
Raised by services and turned into JSON result objects by the app error handlers
"""


class ServiceError(Exception):
    """Base class for expected, user-facing service failures"""
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class InvalidStateError(ServiceError):
    """Operation not allowed in the record's current status"""
    status_code = 400


class PermissionDenied(ServiceError):
    status_code = 403
