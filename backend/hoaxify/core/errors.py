# hoaxify/core/errors.py
"""
API error taxonomy.

Every class is an HTTPException whose ``detail`` is a message key from the
locale catalogs; the handler in ``hoaxify.main`` translates it and renders
the ``{path, timestamp, message[, validationErrors]}`` envelope.
"""
from __future__ import annotations

from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message_key: str = "internal_error"

    def __init__(self, message_key: str | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=message_key or self.message_key)

    @property
    def message(self) -> str:
        return str(self.detail)


class AuthenticationFailure(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message_key = "authentication_failure"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    message_key = "inactive_authentication_failure"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message_key: str) -> None:
        super().__init__(message_key)


class InvalidActivationToken(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    message_key = "account_activation_failure"


class FileSizeLimitExceeded(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    message_key = "attachment_size_limit"


class EmailDeliveryFailure(ApiError):
    status_code = status.HTTP_502_BAD_GATEWAY
    message_key = "email_failure"


class ValidationFailure(ApiError):
    """
    Carries every failing field at once: ``{field_name: message_key}``.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    message_key = "validation_failure"

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__()
        self.errors = dict(errors)
