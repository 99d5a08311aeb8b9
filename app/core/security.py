# Implements security-related functionality:
# JWT token generation and verification
# The authenticated user id travels in the "sub" claim
# Friend invite links carry their own signed token with a "purpose" claim

from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union
import logging

from jose import jwt, JWTError

from app.core.config import settings

logger = logging.getLogger("app")

INVITE_TOKEN_PURPOSE = "friend-invite"

def _encode(subject: Union[str, Any], expires_delta: timedelta, **claims: Any) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"exp": expire, "sub": str(subject), **claims}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def _decode(token: str) -> Optional[dict]:
    try:
        return jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.warning(f"JWT verification error: {e}")
        return None

def create_access_token(subject: Union[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    if not expires_delta:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(subject, expires_delta)

def verify_access_token(token: str) -> Optional[str]:
    """Return the user id carried by a valid token, None otherwise.

    Expiry is checked by ``jwt.decode`` itself.
    """
    payload = _decode(token)
    if payload is None:
        return None

    if payload.get("purpose"):
        logger.warning(f"Token with purpose '{payload['purpose']}' used as access token")
        return None

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Token payload missing 'sub' field")
        return None

    return str(user_id)

def create_invite_token(inviter_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Mint the secret part of an invitation link for ``inviter_id``"""
    if not expires_delta:
        expires_delta = timedelta(minutes=settings.INVITE_TOKEN_EXPIRE_MINUTES)
    return _encode(inviter_id, expires_delta, purpose=INVITE_TOKEN_PURPOSE)

def verify_invite_token(token: str, inviter_id: str) -> bool:
    """Check that ``token`` is an unexpired invite minted by ``inviter_id``"""
    payload = _decode(token)
    if payload is None:
        return False

    if payload.get("purpose") != INVITE_TOKEN_PURPOSE:
        logger.warning("Token without invite purpose presented as invite token")
        return False

    return payload.get("sub") == str(inviter_id)
