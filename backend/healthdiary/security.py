"""
Health Diary Backend — Password Hashing & Tokens
=================================================

What:  bcrypt password hashing and JWT issue/verify helpers.
How:   bcrypt for hashes (cost from settings.bcrypt_rounds, run off the event
       loop; bcrypt only accepts up to 72 bytes of password), python-jose
       for HS256 tokens that expire after settings.jwt_expires_hours.

Token failure mapping:
    expired signature  → AuthenticationError (401) "Token has expired..."
    anything else      → AuthorizationError  (403) "Invalid token..."
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from starlette.concurrency import run_in_threadpool

from healthdiary.config import settings
from healthdiary.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)


def _hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _check(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash, or the password is over 72 bytes
        logger.warning("Password check rejected by bcrypt")
        return False


async def hash_password(password: str) -> str:
    """Hashes in the threadpool; a bcrypt round blocks for tens of milliseconds."""
    return await run_in_threadpool(_hash, password)


async def verify_password(password: str, hashed: str) -> bool:
    return await run_in_threadpool(_check, password, hashed)


def create_access_token(claims: Dict[str, Any]) -> str:
    """Signs the given claims, adding iat and exp."""
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload["iat"] = now
    payload["exp"] = now + timedelta(hours=settings.jwt_expires_hours)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verifies a token and returns its claims.

    Raises:
        AuthenticationError: The token has expired (401, client logs out)
        AuthorizationError:  Bad signature or malformed token (403)
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        logger.warning("Rejected expired token")
        raise AuthenticationError(message="Token has expired. Please login again.")
    except JWTError as e:
        logger.warning("Rejected invalid token: %s", str(e))
        raise AuthorizationError(message="Invalid token. Please provide a valid token.")
