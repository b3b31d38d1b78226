import base64
import hashlib
import bcrypt as _bcrypt
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from app.config import settings


def _prehash(password: str) -> bytes:
    """SHA-256 prehash → 44 bytes base64, keeps any password within bcrypt's 72-byte limit."""
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str) -> str:
    """Hash password using bcrypt directly."""
    salt = _bcrypt.gensalt(rounds=settings.bcrypt_cost_factor)
    return _bcrypt.hashpw(_prehash(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password against hash. Accounts without a credential never match."""
    if not hashed_password:
        return False
    return _bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8"))


def check_new_password(password: str, confirm_password: str) -> Optional[str]:
    """Return a validation message for a new password, or None when acceptable."""
    if not password or not confirm_password:
        return "Preencha todos os campos de senha."
    if password != confirm_password:
        return "As senhas não coincidem."
    if len(password) < settings.min_password_length:
        return f"A senha deve ter pelo menos {settings.min_password_length} caracteres."
    return None


def _encode(data: dict, expire: datetime, token_type: str) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": expire, "type": token_type})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token with expiration"""
    delta = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    return _encode(data, datetime.now(timezone.utc) + delta, "access")


def create_refresh_token(data: dict) -> str:
    """Create JWT refresh token with long expiration"""
    expire = datetime.now(timezone.utc) + timedelta(days=settings.jwt_refresh_token_expire_days)
    return _encode(data, expire, "refresh")


def verify_token(token: str, expected_type: str = "access") -> Optional[dict]:
    """Verify JWT token and return payload if valid"""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if payload.get("type") != expected_type:
        return None
    return payload
