from typing import Optional

from pydantic import Field, field_validator

from factdesk.db.models.enums import ClaimStatus
from factdesk.schemas.base import RequestModel


def _check_url(value: Optional[str]) -> Optional[str]:
    if value in (None, ""):
        return None
    if not value.startswith(("http://", "https://")):
        raise ValueError("must be an http(s) URL")
    return value


class ClaimCreate(RequestModel):
    """
    Body of ``POST /claims``.

    The category is checked against the fixed category list by the claim
    store, which owns that rule.
    """

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    video_url: Optional[str] = None
    source_url: Optional[str] = None

    @field_validator("video_url", "source_url")
    @classmethod
    def check_urls(cls, v):
        return _check_url(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "New tax on mobile money",
                "description": "A viral post says a 10% levy starts next month.",
                "category": "economy",
                "sourceUrl": "https://example.com/post/123"
            }
        }
    }


class ClaimUpdate(RequestModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    video_url: Optional[str] = None
    source_url: Optional[str] = None
    is_trending: Optional[bool] = None

    @field_validator("video_url", "source_url")
    @classmethod
    def check_urls(cls, v):
        return _check_url(v)


class ClaimStatusUpdate(RequestModel):
    status: ClaimStatus
    note: Optional[str] = Field(None, max_length=2000)
