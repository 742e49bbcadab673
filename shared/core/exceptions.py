from fastapi import status

from shared.utils.app_status_code import AppStatusCode


class AppError(Exception):
    """Base exception for the stock ledger services."""

    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred"
    default_code = AppStatusCode.OPERATION_FAILED

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self):
        error_dict = {
            "error": self.message,
            "status_code": self.code,
        }
        if self.details:
            error_dict["details"] = self.details
        return error_dict


class InvalidArgumentError(AppError):
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"
    default_code = AppStatusCode.INVALID_INPUT


class InsufficientInventoryError(AppError):
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "insufficient inventory"
    default_code = AppStatusCode.INSUFFICIENT_INVENTORY


class UnauthorizedError(AppError):
    http_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"
    default_code = AppStatusCode.AUTHENTICATION_TOKEN_INVALID


class ForbiddenError(AppError):
    http_status = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"
    default_code = AppStatusCode.PERMISSION_DENIED


class NotFoundError(AppError):
    http_status = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"
    default_code = AppStatusCode.RECORD_NOT_FOUND


class ConflictError(AppError):
    http_status = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"
    default_code = AppStatusCode.DUPLICATE_RECORD


class InternalError(AppError):
    pass
