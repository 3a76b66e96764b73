"""Domain exceptions and their HTTP rendering"""

from typing import Dict, List, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from .utils.logging import get_logger

logger = get_logger(__name__)


class HypeShelfError(Exception):
    """Base class for errors raised by the service layer"""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request failed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class UnauthenticatedError(HypeShelfError):
    """No verified caller where one is required"""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class NotFoundError(HypeShelfError):
    """Referenced user or recommendation does not exist"""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ForbiddenError(HypeShelfError):
    """Caller is authenticated but not permitted"""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Insufficient permissions"


class ValidationFailedError(HypeShelfError):
    """Field constraints violated"""

    status_code = 422
    default_detail = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]], detail: Optional[str] = None):
        self.errors = errors
        super().__init__(detail)


class WebhookVerificationError(HypeShelfError):
    """Webhook signature missing, invalid or expired"""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid signature"


class MalformedEventError(HypeShelfError):
    """Webhook request could not be parsed"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Malformed event"


class WebhookNotConfiguredError(HypeShelfError):
    """No signing secret configured, so no event can be trusted"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Webhook secret not configured"


async def hypeshelf_exception_handler(request: Request, exc: HypeShelfError) -> JSONResponse:
    """Render a domain error as JSON"""

    content = {"error_code": exc.status_code, "detail": exc.detail}
    headers = None

    if isinstance(exc, ValidationFailedError):
        content["errors"] = exc.errors
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}

    logger.info(
        "Request rejected",
        method=request.method,
        path=request.url.path,
        error=type(exc).__name__,
        status_code=exc.status_code,
    )

    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)
