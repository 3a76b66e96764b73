"""Rate limiting utilities"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from ..config import settings
from ..exceptions import UnauthenticatedError
from .auth import verify_identity


def get_user_rate_limit_key(request: Request) -> str:
    """
    Get rate limit key based on the caller's token subject

    Falls back to IP address if the caller is anonymous or the token does
    not verify.
    """
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        try:
            identity = verify_identity(auth_header.split(" ", 1)[1])
            return f"user:{identity.external_id}"
        except UnauthenticatedError:
            pass

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window"
)
