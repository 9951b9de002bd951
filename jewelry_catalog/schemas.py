"""Insert schemas used to validate catalog request bodies."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

__all__ = [
    "CategoryCreate",
    "ProductCreate",
    "CarouselImageCreate",
    "ShopInfoUpdate",
    "ValidationError",
    "validation_message",
]

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class _CatalogModel(BaseModel):
    # Extra fields are stored untouched; the catalog is schemaless in Mongo.
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    def to_document(self) -> Dict[str, Any]:
        document = self.model_dump(exclude_none=True)
        document.pop("_id", None)
        return document


class CategoryCreate(_CatalogModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    imageUrl: Optional[str] = None
    displayOrder: int = 0


class ProductCreate(_CatalogModel):
    name: str = Field(min_length=1)
    description: str = ""
    price: float = Field(ge=0)
    originalPrice: Optional[float] = Field(default=None, ge=0)
    category: str = Field(min_length=1)
    imageUrl: str = ""
    subImages: List[str] = Field(default_factory=list)
    purity: Optional[str] = None
    weight: Optional[str] = None
    stone: Optional[str] = None
    gender: Optional[str] = None
    occasion: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    featured: bool = False
    inStock: bool = True
    isNewArrival: bool = False
    isTrending: bool = False
    isExclusive: bool = False
    displayOrder: int = 0


class CarouselImageCreate(_CatalogModel):
    imageUrl: str = Field(min_length=1)
    title: str = Field(min_length=1)
    subtitle: Optional[str] = None
    buttonText: Optional[str] = None
    buttonLink: Optional[str] = None
    active: bool = True
    displayOrder: int = 0


class ShopInfoUpdate(_CatalogModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    hours: Optional[str] = None
    facebookUrl: Optional[str] = None
    instagramUrl: Optional[str] = None
    pinterestUrl: Optional[str] = None
    whatsapp: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        document = self.model_dump(exclude_unset=True)
        document.pop("_id", None)
        return document


def validation_message(exc: ValidationError) -> str:
    """Flatten a pydantic error into one readable line."""

    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "body"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)
