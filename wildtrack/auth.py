# wildtrack/auth.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from passlib.context import CryptContext

from wildtrack.config import settings


# Load Security Configurations
SECRET_KEY = settings.JWT_SECRET_KEY
ALGORITHM = settings.JWT_ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

# Roles allowed through the admin gate
STAFF_ROLES = ("admin", "manager")

# Password Hashing Configuration (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Password Hashing Functions
def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Malformed or unknown hash format
        return False


class TokenExpired(Exception):
    pass


class TokenInvalid(Exception):
    pass


class TokenCodec:
    """Signs and verifies the bearer tokens handed out at login.

    The payload is signed, not encrypted: it only ever carries the subject id,
    username and role. Expiry is checked here against an injectable clock so
    the codec stays a pure function of secret, payload and time.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_delta: Optional[timedelta] = None):
        if not secret:
            raise ValueError("JWT secret must not be blank")
        self.secret = secret
        self.algorithm = algorithm
        self.expires_delta = expires_delta or timedelta(days=7)

    def issue(self, subject_id: Any, role: str, username: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        expire = now + self.expires_delta
        payload = {
            "sub": str(subject_id),
            "username": username,
            "role": role,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as e:
            raise TokenInvalid(str(e)) from e

        sub = payload.get("sub")
        role = payload.get("role")
        expire = payload.get("exp")
        if not sub or not role or not isinstance(expire, int):
            raise TokenInvalid("Token is missing required claims")

        now = now or datetime.now(timezone.utc)
        if now.timestamp() > expire:
            raise TokenExpired("Token has expired")

        return {"id": sub, "username": payload.get("username"), "role": role}


token_codec = TokenCodec(
    SECRET_KEY,
    algorithm=ALGORITHM,
    expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
)

# JWT Token Creation
def create_access_token(subject_id: Any, role: str, username: str) -> str:
    return token_codec.issue(subject_id, role, username)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if not header or not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    return token or None


# JWT Token Verification (stateless, no store lookup)
def get_current_user(request: Request) -> Dict[str, Any]:
    token = _bearer_token(request)
    if token is None:
        raise _unauthorized("Access denied. No token provided.")

    try:
        claims = token_codec.verify(token)
    except TokenExpired:
        raise _unauthorized("Token expired. Please login again.")
    except TokenInvalid:
        raise _unauthorized("Invalid token.")

    request.state.user = claims
    return claims


def get_optional_user(request: Request) -> Optional[Dict[str, Any]]:
    """Like get_current_user, but anonymous callers pass through as None."""
    token = _bearer_token(request)
    if token is None:
        return None
    try:
        claims = token_codec.verify(token)
    except (TokenExpired, TokenInvalid):
        return None
    request.state.user = claims
    return claims


def authorize(claims: Dict[str, Any], allowed_roles: Iterable[str]) -> Dict[str, Any]:
    if claims.get("role") not in tuple(allowed_roles):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin privileges required.",
        )
    return claims


def require_roles(*allowed_roles: str):
    """Dependency factory: authenticate first, then check the role allow-list."""

    def dependency(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        return authorize(current_user, allowed_roles)

    return dependency

# Admin Verification Dependency
verify_admin_user = require_roles(*STAFF_ROLES)
