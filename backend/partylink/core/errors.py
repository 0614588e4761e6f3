from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse


class PartylinkError(Exception):
    """Base for errors raised by services. Message is shown to the user as-is."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PartylinkError):
    status_code = 422


class NotFoundError(PartylinkError):
    status_code = 404


async def partylink_error_handler(request: Request, exc: PartylinkError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
