class AppException(Exception):
    """
    Base class for errors that are reported to the API caller.
    Each subclass fixes the HTTP status and the machine-readable error code.
    """
    status_code = 500
    error = "INTERNAL"

    def __init__(self, message: str = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__

    def to_dict(self):
        return {"success": False, "error": self.error, "message": self.message}


class ValidationException(AppException):
    status_code = 400
    error = "VALIDATION"


class ReferenceNotFoundException(AppException):
    """A stored reference (product, order item) points at a record that does not exist."""
    status_code = 400
    error = "REFERENCE"


class NotFoundException(AppException):
    status_code = 404
    error = "NOT_FOUND"


class StorageException(AppException):
    status_code = 500
    error = "STORAGE"


class UnauthorizedAccessException(AppException):
    status_code = 401
    error = "UNAUTHORIZED"
