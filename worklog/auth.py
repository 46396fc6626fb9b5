from passlib.context import CryptContext
from jose import jwt, JWTError
from datetime import datetime, timedelta
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Dict, Any, Optional

from worklog.core.config import settings
from worklog.core.exceptions import AuthError

pwd_context = CryptContext(schemes=[settings.PASSWORD_SCHEME], deprecated="auto")
security = HTTPBearer(auto_error=False)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_minutes: Optional[int] = None):
    to_encode = data.copy()
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.utcnow() + timedelta(minutes=minutes)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def decode_token(token):
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except JWTError:
        return None


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Dict[str, Any]:
    """
    Extract and validate JWT token from Authorization header
    Returns user information from token payload
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("No token provided")

    # jose rejects expired tokens, so they come back as None too
    payload = decode_token(credentials.credentials)
    if payload is None:
        raise AuthError("Invalid or expired token")

    user_id = payload.get("user_id")
    if user_id is None:
        raise AuthError("Invalid authentication credentials")

    return {"user_id": int(user_id), "payload": payload}


def get_current_user_id(current_user: Dict[str, Any] = Depends(get_current_user)) -> int:
    """Authenticated user id, passed explicitly into every service call"""
    return current_user["user_id"]
