import re
from typing import Optional

EMBED_URL = "https://www.youtube.com/embed/{}"

# Порядок важен: watch, короткая ссылка, embed, голый ID
YOUTUBE_PATTERNS = [
    re.compile(r'(?:youtube\.com/watch\?(?:.*&)?v=)([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])'),
    re.compile(r'(?:youtu\.be/)([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])'),
    re.compile(r'(?:youtube(?:-nocookie)?\.com/embed/)([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])'),
    re.compile(r'^([A-Za-z0-9_-]{11})$'),
]

def extract_youtube_id(url: str) -> Optional[str]:
    """Извлекает 11-символьный ID видео из ссылки YouTube"""
    if not url:
        return None
    
    url = url.strip()
    for pattern in YOUTUBE_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    
    return None

def normalize_youtube_url(url: str) -> str:
    """Приводит ссылку к виду https://www.youtube.com/embed/{id}.
    
    Нераспознанный ввод возвращается без изменений.
    """
    video_id = extract_youtube_id(url)
    if video_id is None:
        return url
    return EMBED_URL.format(video_id)
