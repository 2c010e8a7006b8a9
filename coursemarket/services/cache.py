import threading
import time
from typing import Any, Dict, Optional, Tuple


class Cache:
    """Интерфейс кэша: get / set / delete по ключу с TTL в секундах"""
    
    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError
    
    def set(self, key: str, value: Any, ttl: int) -> None:
        raise NotImplementedError
    
    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryCache(Cache):
    """Процессный кэш с истечением записей по времени"""
    
    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._items: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()
    
    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._items.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._items[key]
                return None
            return value
    
    def set(self, key: str, value: Any, ttl: int) -> None:
        with self._lock:
            self._items[key] = (self._clock() + ttl, value)
    
    def delete(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)
    
    def clear(self) -> None:
        with self._lock:
            self._items.clear()


class NullCache(Cache):
    """Кэш, который ничего не хранит"""
    
    def get(self, key: str) -> Optional[Any]:
        return None
    
    def set(self, key: str, value: Any, ttl: int) -> None:
        pass
    
    def delete(self, key: str) -> None:
        pass


def public_profile_key(user_id: int) -> str:
    return f"users:public:{user_id}"


CATEGORIES_KEY = "categories:all"
