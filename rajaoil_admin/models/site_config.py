from pydantic import BaseModel, field_validator
from typing import List


class SiteConfig(BaseModel):
    """
    The root configuration document ("others").
    Holds the sidecar lists shared by the catalog and the media library.
    """
    brands: List[str] = []
    category: List[str] = []
    images: List[str] = []
    homepageSlider: List[str] = []

    @field_validator("brands", "category", "images", "homepageSlider", mode="before")
    @classmethod
    def _list_when_missing(cls, value):
        return value or []

    @classmethod
    def from_document(cls, raw) -> "SiteConfig":
        if not raw:
            return cls()
        return cls.model_validate(raw)
