"""
Error types raised by the service layer.

The API layer turns every ``CRMError`` into a ``{"error": message}`` response
with the error's HTTP status code.
"""
from typing import Optional


class CRMError(Exception):
    """Base error for expected, client-facing failures"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(CRMError):
    """Missing required field or invalid enum value"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        if field:
            message = f"{field}: {message}"
        super().__init__(message)
        self.field = field


class NotFoundError(CRMError):
    """Referenced record does not exist"""

    status_code = 404

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} {identifier} not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class ConflictError(CRMError):
    """Operation refused because of existing related records"""

    status_code = 400
