from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


class ProductVariant(BaseModel):
    """One sellable type of a product (e.g. 1L pouch, 5L can)."""
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    image: str = ""
    offer: str = ""

    @field_validator("image", "offer", mode="before")
    @classmethod
    def _empty_when_missing(cls, value):
        return value or ""


class Product(BaseModel):
    name: str
    brand: str = ""
    category: str = ""
    types: List[ProductVariant] = []
    mainImage: str = ""

    @field_validator("brand", "category", "mainImage", mode="before")
    @classmethod
    def _empty_when_missing(cls, value):
        return value or ""

    @classmethod
    def from_document(cls, raw: dict) -> "Product":
        data = dict(raw)
        data["name"] = str(data.pop("_id"))
        data.pop("docType", None)
        return cls.model_validate(data)


class VariantDraft(BaseModel):
    name: str = ""
    price: Optional[float] = None
    image: str = ""
    offer: str = ""


class ProductCreate(BaseModel):
    name: str
    brand: str = ""
    category: str = ""
    mainImage: str = ""
    types: List[VariantDraft] = []


class ProductUpdate(BaseModel):
    brand: str = ""
    category: str = ""
    mainImage: str = ""


class NameRequest(BaseModel):
    name: str
