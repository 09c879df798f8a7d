"""Object listing with dimensions recovered from keys."""

import logging
from datetime import datetime, timezone
from typing import Optional

from snapvault.core.config import settings
from snapvault.models.image import ImagePage, StoredObject
from snapvault.storage.base import ObjectInfo, StorageBackend
from snapvault.storage.keys import OBJECT_KEY_PREFIX, key_extension, parse_dimensions_from_key

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp"})

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class ObjectLister:
    """Lists uploaded objects without a metadata round-trip per object.

    Dimensions come from the object key, so a page costs one listing call.
    """

    def __init__(self, backend: StorageBackend, page_size: Optional[int] = None):
        self.backend = backend
        self.page_size = page_size or settings.IMAGE_LIST_PAGE_SIZE

    def to_stored_object(self, obj: ObjectInfo) -> StoredObject:
        return StoredObject(
            key=obj.key,
            url=self.backend.public_url(obj.key),
            last_modified=obj.last_modified,
            size=obj.size,
            dimensions=parse_dimensions_from_key(obj.key),
        )

    def _paginate(self, objects: list[ObjectInfo], cursor: Optional[str]) -> ImagePage:
        """Sort newest first and cut the page that starts strictly after ``cursor``.

        An unknown cursor restarts from the newest object.
        """
        objects = sorted(objects, key=lambda obj: obj.last_modified or _EPOCH, reverse=True)

        start = 0
        if cursor:
            keys = [obj.key for obj in objects]
            start = keys.index(cursor) + 1 if cursor in keys else 0

        page = objects[start:start + self.page_size]
        next_cursor = page[-1].key if len(page) == self.page_size else None

        logger.debug(
            "Listed objects",
            extra={"cursor": cursor, "returned": len(page), "total_count": len(objects)},
        )

        return ImagePage(
            images=[self.to_stored_object(obj) for obj in page],
            next_cursor=next_cursor,
            total_count=len(objects),
        )

    async def _uploaded_objects(self) -> list[ObjectInfo]:
        return await self.backend.list_objects(f"{OBJECT_KEY_PREFIX}/")

    async def _image_objects(self) -> list[ObjectInfo]:
        objects = await self._uploaded_objects()
        return [obj for obj in objects if key_extension(obj.key) in IMAGE_EXTENSIONS]

    async def list_objects(self, cursor: Optional[str] = None) -> ImagePage:
        """Return one page of every uploaded object, images or not."""
        return self._paginate(await self._uploaded_objects(), cursor)

    async def list_images(self, cursor: Optional[str] = None) -> ImagePage:
        """Return one page of uploaded images (jpg, jpeg, png, gif, webp)."""
        return self._paginate(await self._image_objects(), cursor)

    async def count_images(self) -> int:
        """Return the total number of stored images."""
        return len(await self._image_objects())
