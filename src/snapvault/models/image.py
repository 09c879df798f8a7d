"""Image metadata models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImageDimensions(BaseModel):
    """Pixel width and height of an image."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=0)
    height: int = Field(ge=0)


class StoredObject(CamelModel):
    """A persisted object in the bucket, with dimensions recovered from its key."""

    key: str
    url: str
    last_modified: Optional[datetime] = None
    size: Optional[int] = None
    dimensions: Optional[ImageDimensions] = None


class ImagePage(CamelModel):
    """One page of the gallery listing."""

    images: list[StoredObject]
    next_cursor: Optional[str] = None
    total_count: int


class ImageCountResponse(CamelModel):
    """Response model for the gallery count."""

    count: int
