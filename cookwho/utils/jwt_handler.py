from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from cookwho.settings.config import settings
from cookwho.utils.logger import get_logger

logger = get_logger("JWT_HANDLER")

def create_access_token(data: dict):
    """
    Creates JWT token with expiry.
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "iat": now})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    logger.info(f"Access token created successfully with expiry {expire}")
    return encoded_jwt

def decode_access_token(token: str):
    """
    Decode JWT token and return payload.
    Raises ValueError if invalid or expired.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise ValueError("Invalid token") from e
