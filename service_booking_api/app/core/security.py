"""
Authentication for the booking API.

Bearer tokens are compact HS256 JWTs built with the standard library:
``sub`` holds the user's id and ``exp`` the expiry as a Unix
timestamp.  Passwords are stored as ``salt$hash`` hex pairs produced by
PBKDF2-HMAC-SHA256.

``get_current_user`` turns the ``Authorization`` header into the
user's document; ``require_role`` builds route guards on top of it.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.database import Database

from .config import settings
from .db import USERS, get_db, parse_object_id
from ..schemas.user import Role


PBKDF2_ITERATIONS = 100_000
TOKEN_HEADER = {"alg": "HS256", "typ": "JWT"}


def _encode_segment(value: Dict[str, Any]) -> str:
    raw = json.dumps(value, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _decode_segment(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _signature(header_segment: str, payload_segment: str) -> bytes:
    message = f"{header_segment}.{payload_segment}".encode("ascii")
    return hmac.new(settings.secret_key.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(claims: Dict[str, str], expires_delta: Optional[int] = None) -> str:
    """Sign ``claims`` into a token.

    ``expires_delta`` is the lifetime in seconds; by default
    ``ACCESS_TOKEN_EXPIRE_MINUTES``.
    """
    lifetime = expires_delta or settings.access_token_expire_minutes * 60
    payload = {**claims, "exp": int(time.time()) + lifetime}
    header_segment = _encode_segment(TOKEN_HEADER)
    payload_segment = _encode_segment(payload)
    signature = base64.urlsafe_b64encode(_signature(header_segment, payload_segment)).rstrip(b"=")
    return f"{header_segment}.{payload_segment}.{signature.decode('ascii')}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the claims of a valid, unexpired token, else ``None``."""
    try:
        header_segment, payload_segment, signature_segment = token.split(".")
        if not hmac.compare_digest(
            _signature(header_segment, payload_segment), _decode_segment(signature_segment)
        ):
            return None
        claims = json.loads(_decode_segment(payload_segment))
    except (ValueError, UnicodeError):
        return None
    if not isinstance(claims, dict):
        return None
    expires = claims.get("exp")
    if expires is None or int(expires) < int(time.time()):
        return None
    return claims


security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Database = Depends(get_db),
) -> dict:
    """Dependency that retrieves the current authenticated user.

    Raises HTTP 401 when the header is missing, the token is invalid
    or expired, or the user it names no longer exists.  On success
    returns the user document without its password hash.
    """
    if credentials is None:
        raise _unauthorized("Not authorized, no token")
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Not authorized, token failed")
    user_id = parse_object_id(str(payload.get("sub", "")))
    user = db[USERS].find_one({"_id": user_id}, {"password": 0}) if user_id else None
    if not user:
        raise _unauthorized("User no longer exists")
    return user


def require_role(*roles: Role) -> Callable[[dict], dict]:
    """Dependency factory enforcing that the current user holds one of ``roles``.

    Use in routes as ``Depends(require_role(Role.ADMIN))``.  Raises
    HTTP 403 for authenticated users without the role.
    """
    allowed = {role.value for role in roles}

    def _role_dependency(current_user: dict = Depends(get_current_user)) -> dict:
        if current_user.get("role") not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized as admin" if allowed == {Role.ADMIN.value} else "Insufficient permissions",
            )
        return current_user

    return _role_dependency


def is_admin(user: dict) -> bool:
    return user.get("role") == Role.ADMIN.value


def _pbkdf2(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)


def hash_password(password: str) -> str:
    """Return ``"<salt hex>$<hash hex>"`` for ``password`` with a fresh salt."""
    salt = os.urandom(16)
    return f"{salt.hex()}${_pbkdf2(password, salt).hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check ``plain_password`` against a stored ``salt$hash`` value.

    Missing or malformed stored values never verify.
    """
    salt_hex, _, hash_hex = (hashed_password or "").partition("$")
    try:
        salt, expected = bytes.fromhex(salt_hex), bytes.fromhex(hash_hex)
    except ValueError:
        return False
    if not salt or not expected:
        return False
    return hmac.compare_digest(_pbkdf2(plain_password, salt), expected)
