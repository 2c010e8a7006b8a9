import hashlib
import hmac
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from coursemarket.config import settings
from coursemarket.core.exceptions import UnauthorizedException
from coursemarket.schemas.user import TokenData


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Выпуск токена идентификации (используется провайдером и в тестах)"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenData:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise UnauthorizedException("Could not validate credentials")

    firebase_uid = payload.get("sub")
    if not firebase_uid:
        raise UnauthorizedException("Could not validate credentials")

    return TokenData(
        firebase_uid=firebase_uid,
        email=payload.get("email"),
        name=payload.get("name"),
        email_verified=bool(payload.get("email_verified", False)),
        picture=payload.get("picture"),
    )


def _signature_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def sign_webhook_payload(data: dict, secret: Optional[str] = None) -> str:
    """HMAC-SHA256 по строке key=value, ключи отсортированы и склеены через &"""
    message = "&".join(f"{key}={_signature_value(data[key])}" for key in sorted(data))
    key = (secret or settings.PAYMENT_WEBHOOK_SECRET).encode()
    return hmac.new(key, message.encode(), hashlib.sha256).hexdigest()


def verify_webhook_signature(data: dict, signature: Optional[str], secret: Optional[str] = None) -> bool:
    if not signature:
        return False
    return hmac.compare_digest(sign_webhook_payload(data, secret), signature)
