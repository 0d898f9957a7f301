"""
Service Errors

Error taxonomy shared by the services and mapped to HTTP responses in app.py.
"""


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailure(ServiceError):
    """A required field is missing or a value is not acceptable."""
    status_code = 400


class NotFound(ServiceError):
    """The requested row does not exist."""
    status_code = 404


class StoreFailure(ServiceError):
    """The backing store could not be reached or rejected the query."""
    status_code = 500
