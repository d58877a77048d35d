from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .utils import logger


class ParkingAPIError(Exception):
    """An error rendered to the client as ``{"error": ..., "message": ...}``."""

    def __init__(self, status_code: int, error: str, message: Optional[str] = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.message = message


def error_body(error: str, message: Optional[str] = None) -> dict:
    body = {"error": error}
    if message is not None:
        body["message"] = message
    return body


async def parking_api_error_handler(request: Request, exc: ParkingAPIError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.error, exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content=error_body("Invalid request", details))


async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500, content=error_body("Something went wrong!", str(exc))
    )
