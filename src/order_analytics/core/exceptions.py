"""Error types raised by the analytics layer and their HTTP rendering.

Authentication failures stay plain ``HTTPException``s raised by the token
dependency. Everything raised from behind the admin guard derives from
``AnalyticsError`` and is rendered as ``{"message": ..., "error": ...}``.
"""
import logging
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AnalyticsError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        if message is not None:
            self.message = message
        self.error = error
        super().__init__(self.message if error is None else f"{self.message}: {error}")

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class ForbiddenError(AnalyticsError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Admin access required"


class DataStoreError(AnalyticsError):
    """A report query failed inside the ORM or the database driver."""


async def analytics_exception_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected with {exc.status_code}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def analytics_exception_handlers() -> dict:
    return {AnalyticsError: analytics_exception_handler}
