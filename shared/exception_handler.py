import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.core.exceptions import AppError
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)

_HTTP_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: AppStatusCode.INVALID_INPUT,
    status.HTTP_401_UNAUTHORIZED: AppStatusCode.AUTHENTICATION_TOKEN_INVALID,
    status.HTTP_403_FORBIDDEN: AppStatusCode.PERMISSION_DENIED,
    status.HTTP_404_NOT_FOUND: AppStatusCode.RECORD_NOT_FOUND,
    status.HTTP_409_CONFLICT: AppStatusCode.DUPLICATE_RECORD,
}


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return "; ".join(parts) or "Invalid request"


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(content=exc.to_dict(), status_code=exc.http_status)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        content = {
            "error": str(exc.detail),
            "status_code": _HTTP_STATUS_CODES.get(exc.status_code, AppStatusCode.OPERATION_FAILED),
        }
        return JSONResponse(content=content, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        content = {
            "error": _format_validation_errors(exc),
            "status_code": AppStatusCode.INVALID_INPUT,
        }
        return JSONResponse(content=content, status_code=status.HTTP_400_BAD_REQUEST)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {
            "error": "Internal server error",
            "status_code": AppStatusCode.OPERATION_FAILED,
        }
        return JSONResponse(content=content, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
