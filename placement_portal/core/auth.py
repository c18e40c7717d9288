"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- Account registration / login against the store
- FastAPI dependencies for protected routes (one per role)
"""

from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from loguru import logger
from passlib.context import CryptContext

from placement_portal.core.config import get_settings
from placement_portal.core.errors import ForbiddenError, ValidationError
from placement_portal.db import get_store
from placement_portal.db.repositories import Store
from placement_portal.models.entities import Role, User
from placement_portal.utils.timestamp import utcnow

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor (missing header is answered with 401 below, not 403)
bearer_scheme = HTTPBearer(auto_error=False)

INVALID_CREDENTIALS = "Invalid email or password"


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash. Unknown hash formats never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token carrying sub (user id), email and role."""
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    claims = {"sub": str(user.id), "email": user.email, "role": user.role.value, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def parse_role(value: Optional[str]) -> Role:
    try:
        return Role(str(value).upper())
    except ValueError:
        raise ValidationError("Invalid role")


# ============================================================
# ACCOUNTS
# ============================================================

def register_user(
    store: Store,
    email: Optional[str],
    password: Optional[str],
    role: Optional[str],
    name: Optional[str] = None,
    phone: Optional[str] = None,
) -> User:
    """
    Raises:
        ValidationError: missing email/password/role or unknown role
        ConflictError: email already registered (case-insensitive)
    """
    if not email or not password or not role:
        raise ValidationError("Email, password, and role are required")

    user = store.users.add(User(
        name=name or "",
        email=email,
        phone=phone or "",
        role=parse_role(role),
        password_hash=hash_password(password),
    ))
    logger.info(f"Registered user {user.id} as {user.role.value}")
    return user


def authenticate(store: Store, email: Optional[str], password: Optional[str], role: Optional[str] = None) -> User:
    """
    Raises:
        ValidationError: missing email/password
        HTTPException(401): unknown email or wrong password
        ForbiddenError: a role was given and it is not the account's role
    """
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = store.users.get_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for {email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    if role and user.role.value != str(role).upper():
        raise ForbiddenError("You are not registered with this role")

    return user


# ============================================================
# DEPENDENCIES
# ============================================================

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: Store = Depends(get_store),
) -> User:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: User = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise credentials_exception

    try:
        user_id = int(payload["sub"])
    except ValueError:
        raise credentials_exception

    user = store.users.get(user_id)
    if user is None:
        raise credentials_exception

    return user


def require_role(role: Role):
    """Build a dependency that admits only users holding `role`."""

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role != role:
            raise HTTPException(status_code=403, detail="Forbidden: insufficient role")
        return user

    return dependency


get_current_tpo = require_role(Role.tpo)
get_current_student = require_role(Role.student)
get_current_alumni = require_role(Role.alumni)
