import calendar
import logging
import re
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlencode

from jose import JWTError, jwt

from coursemarket.config import settings
from coursemarket.models.lesson import MediaType

logger = logging.getLogger(__name__)

UPLOAD_TTL = 900  # секунды на загрузку по presigned-ссылке


class StorageService:
    """Ссылки на объекты в хранилище/CDN.
    
    Загрузка и подпись делегируются внешнему хранилищу; здесь
    только формируются ключи и подписанные токены доступа.
    """
    
    def __init__(
        self,
        cdn_base_url: str = None,
        upload_url: str = None,
        signing_key: str = None,
        algorithm: str = None,
    ):
        self.cdn_base_url = (cdn_base_url or settings.CDN_BASE_URL).rstrip("/")
        self.upload_url = (upload_url or settings.STORAGE_UPLOAD_URL).rstrip("/")
        self.signing_key = signing_key or settings.STORAGE_SIGNING_KEY
        self.algorithm = algorithm or settings.ALGORITHM
    
    def build_key(self, lesson_id: int, filename: str) -> str:
        """Ключ объекта: lesson-{id}/{uuid}-{безопасное имя файла}"""
        name = Path(filename or "").name
        safe_name = re.sub(r'[^A-Za-z0-9._-]+', '-', name).strip('-') or "file"
        return f"lesson-{lesson_id}/{uuid.uuid4().hex}-{safe_name}"
    
    def public_url(self, key: str) -> str:
        return f"{self.cdn_base_url}/{key.lstrip('/')}"
    
    def _token(self, subject: str, expires_at: datetime, scope: str) -> str:
        payload = {"sub": subject, "scope": scope, "exp": expires_at}
        return jwt.encode(payload, self.signing_key, algorithm=self.algorithm)
    
    def generate_presigned_upload(self, lesson_id: int, filename: str, media_type: MediaType) -> Dict[str, str]:
        key = self.build_key(lesson_id, filename)
        expires_at = datetime.utcnow() + timedelta(seconds=UPLOAD_TTL)
        query = urlencode({
            "key": key,
            "type": media_type.value,
            "token": self._token(key, expires_at, "upload"),
        })
        logger.info("Presigned upload issued for lesson %s: %s", lesson_id, key)
        return {
            "upload_url": f"{self.upload_url}?{query}",
            "key": key,
            "public_url": self.public_url(key),
        }
    
    def sign_url(self, url: str, expires_in: int = None) -> Dict[str, object]:
        expires_in = expires_in or settings.SIGNED_URL_TTL
        expires_at = datetime.utcnow() + timedelta(seconds=expires_in)
        token = self._token(url, expires_at, "read")
        separator = "&" if "?" in url else "?"
        query = urlencode({"expires": calendar.timegm(expires_at.utctimetuple()), "token": token})
        return {"signed_url": f"{url}{separator}{query}", "expires_in": expires_in}
    
    def verify_token(self, token: str, subject: str, scope: str = "read") -> bool:
        try:
            payload = jwt.decode(token, self.signing_key, algorithms=[self.algorithm])
        except JWTError:
            return False
        return payload.get("sub") == subject and payload.get("scope") == scope
