import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from coursemarket.core.exceptions import (
    BadRequestException,
    LessonNotFoundException,
    MediaNotFoundException,
)
from coursemarket.crud import lesson as crud_lesson
from coursemarket.crud import media as crud_media
from coursemarket.models.lesson import Media, MediaType
from coursemarket.schemas.media import MediaCreate, MediaUpdate
from coursemarket.services.access import AccessGate
from coursemarket.services.durations import DurationMaintainer
from coursemarket.services.ownership import OwnershipResolver
from coursemarket.services.storage_service import StorageService
from coursemarket.services.youtube import normalize_youtube_url

logger = logging.getLogger(__name__)


class MediaService:
    def __init__(self, db: Session, storage: StorageService = None):
        self.db = db
        self.storage = storage or StorageService()
        self.ownership = OwnershipResolver(db)
        self.access = AccessGate(db, self.ownership)
        self.durations = DurationMaintainer(db)

    # === Чтение ===
    def find_by_lesson(self, lesson_id: int, user_id: int = None, role=None) -> List[Media]:
        lesson = crud_lesson.get_lesson(self.db, lesson_id)
        if not lesson:
            raise LessonNotFoundException(lesson_id)

        self.access.ensure_visible(lesson, user_id, role)
        return crud_media.get_media_by_lesson(self.db, lesson_id)

    def find_by_id(self, media_id: int) -> Media:
        media = crud_media.get_media(self.db, media_id)
        if not media:
            raise MediaNotFoundException(media_id)
        return media

    # === Хранилище ===
    def generate_presigned_url(self, lesson_id: int, filename: str, media_type: MediaType, user_id: int, role) -> Dict[str, str]:
        self.ownership.verify_lesson_ownership(lesson_id, user_id, role)

        if media_type == MediaType.YOUTUBE_EMBED:
            raise BadRequestException("YouTube embeds are not uploaded")

        return self.storage.generate_presigned_upload(lesson_id, filename, media_type)

    def generate_signed_url(self, media_id: int, user_id: int = None, role=None) -> Dict[str, object]:
        """Временная ссылка на контент: владелец, бесплатный урок или ACTIVE-запись"""
        media = self.find_by_id(media_id)
        lesson = crud_lesson.get_lesson(self.db, media.lesson_id)
        if not lesson:
            raise LessonNotFoundException(media.lesson_id)

        self.access.ensure_content_access(lesson, user_id, role)
        return self.storage.sign_url(media.url)

    # === Изменение ===
    def _resolve_url(self, data: MediaCreate) -> str:
        if data.type == MediaType.YOUTUBE_EMBED:
            source = data.youtube_url or data.url
            if not source:
                raise BadRequestException("youtube_url is required for YouTube embeds")
            return normalize_youtube_url(source)

        if data.key:
            return self.storage.public_url(data.key)
        if data.url:
            return data.url
        raise BadRequestException("Either key or url is required")

    def create(self, lesson_id: int, data: MediaCreate, user_id: int, role) -> Media:
        lesson = self.ownership.verify_lesson_ownership(lesson_id, user_id, role)

        url = self._resolve_url(data)
        last_order = crud_media.get_last_order(self.db, lesson_id)
        order = 0 if last_order is None else last_order + 1

        media = crud_media.create_media(
            self.db,
            lesson_id,
            order,
            type=data.type,
            url=url,
            title=data.title,
            filename=data.filename,
            mime_type=data.mime_type,
            size=data.size,
            duration=data.duration,
        )

        if media.type == MediaType.VIDEO:
            self.durations.recompute_lesson_and_course(lesson_id, lesson.course_id)

        logger.info("Media %s (%s) added to lesson %s", media.id, media.type.value, lesson_id)
        return media

    def update(self, media_id: int, data: MediaUpdate, user_id: int, role) -> Media:
        media = self.ownership.verify_media_ownership(media_id, user_id, role)
        old_duration = media.duration

        fields = data.dict(exclude_unset=True)
        youtube_url = fields.pop("youtube_url", None)
        if media.type == MediaType.YOUTUBE_EMBED:
            source = youtube_url or fields.get("url")
            if source:
                fields["url"] = normalize_youtube_url(source)

        media = crud_media.update_media(self.db, media_id, **fields)

        if media.type == MediaType.VIDEO and media.duration != old_duration:
            lesson = crud_lesson.get_lesson(self.db, media.lesson_id)
            self.durations.recompute_lesson_and_course(lesson.id, lesson.course_id)
            self.db.refresh(media)

        return media

    def delete(self, media_id: int, user_id: int, role) -> None:
        media = self.ownership.verify_media_ownership(media_id, user_id, role)
        lesson = crud_lesson.get_lesson(self.db, media.lesson_id)
        was_video = media.type == MediaType.VIDEO

        # TODO: удалять объект из хранилища, когда появится API удаления у CDN
        crud_media.delete_media(self.db, media_id)

        if was_video:
            self.durations.recompute_lesson_and_course(lesson.id, lesson.course_id)

        logger.info("Media %s deleted from lesson %s", media_id, lesson.id)

    def reorder(self, lesson_id: int, media_ids: List[int], user_id: int, role) -> List[Media]:
        """Все ID проверяются до записи; чужой ID отклоняет запрос целиком"""
        self.ownership.verify_lesson_ownership(lesson_id, user_id, role)

        known_ids = set(crud_media.get_media_ids(self.db, lesson_id))
        for media_id in media_ids:
            if media_id not in known_ids:
                raise BadRequestException(f"Media {media_id} does not belong to lesson {lesson_id}")

        if len(set(media_ids)) != len(media_ids):
            raise BadRequestException("Duplicate media ids in reorder request")

        items = crud_media.reorder_media(self.db, lesson_id, media_ids)
        logger.info("Media of lesson %s reordered: %s", lesson_id, media_ids)
        return items
