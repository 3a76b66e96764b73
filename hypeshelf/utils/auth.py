"""Verification of identity provider bearer tokens"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from ..config import settings
from ..exceptions import UnauthenticatedError


@dataclass(frozen=True)
class VerifiedIdentity:
    """A caller identity whose token signature and claims have been checked"""

    external_id: str
    claims: Dict[str, Any] = field(default_factory=dict, compare=False)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Mint a token signed with the configured key

    The identity provider normally issues tokens; this is used for local
    development and tests, and only works with symmetric algorithms.

    Args:
        data: Claims to encode (must include "sub")
        expires_delta: Lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    if settings.AUTH_JWT_ISSUER and "iss" not in to_encode:
        to_encode["iss"] = settings.AUTH_JWT_ISSUER
    if settings.AUTH_JWT_AUDIENCE and "aud" not in to_encode:
        to_encode["aud"] = settings.AUTH_JWT_AUDIENCE

    return jwt.encode(to_encode, settings.AUTH_JWT_KEY, algorithm=settings.AUTH_JWT_ALGORITHMS[0])


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a bearer token

    Raises:
        UnauthenticatedError: If the signature, expiry, issuer or audience is invalid
    """
    options = {"verify_aud": settings.AUTH_JWT_AUDIENCE is not None}
    try:
        return jwt.decode(
            token,
            settings.AUTH_JWT_KEY,
            algorithms=settings.AUTH_JWT_ALGORITHMS,
            audience=settings.AUTH_JWT_AUDIENCE,
            issuer=settings.AUTH_JWT_ISSUER,
            options=options,
        )
    except JWTError as e:
        raise UnauthenticatedError("Could not validate credentials") from e


def verify_identity(token: str) -> VerifiedIdentity:
    """Turn a bearer token into a verified identity"""

    payload = decode_token(token)
    subject = payload.get("sub")
    if not subject:
        raise UnauthenticatedError("Could not validate credentials")

    return VerifiedIdentity(external_id=str(subject), claims=payload)
