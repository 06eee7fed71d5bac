"""
Pydantic schemas for the product API.
Centralized so services and routers share one definition.

Input schemas ignore unknown keys: a shallow merge only ever touches the
fields a target actually has.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from catalog_shared.config.constants import Limits


# =============================================================================
# Size Schemas
# =============================================================================


class SizeInput(BaseModel):
    id: str | None = None
    size: str = Field(min_length=1, max_length=Limits.MAX_LABEL_LENGTH)
    stock: int | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, ge=0)


class SizePatch(BaseModel):
    size: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_LABEL_LENGTH)
    stock: int | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, ge=0)

    @field_validator("size")
    @classmethod
    def reject_null_size(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class SizeOutput(BaseModel):
    id: str
    size: str
    stock: int | None = None
    price: float | None = None

    class Config:
        from_attributes = True


# =============================================================================
# Color Schemas
# =============================================================================


class ColorInput(BaseModel):
    """
    One entry of the ``colors`` array.

    ``id`` is only meaningful on update, where it targets an existing color.
    ``sizes`` left unset keeps the sizes of that existing color.
    """

    id: str | None = None
    color: str = Field(min_length=1, max_length=Limits.MAX_LABEL_LENGTH)
    image: str | None = None
    sizes: list[SizeInput] | None = None


class ColorPatch(BaseModel):
    color: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_LABEL_LENGTH)
    image: str | None = None
    sizes: list[SizeInput] | None = None

    @field_validator("color")
    @classmethod
    def reject_null_color(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class ColorOutput(BaseModel):
    id: str
    color: str
    image: str | None = None
    sizes: list[SizeOutput] = []

    class Config:
        from_attributes = True


# =============================================================================
# Product Schemas
# =============================================================================


class ProductCreate(BaseModel):
    """
    Product payload after reference resolution.

    ``category`` and ``brands`` hold resolved identifiers, never free text.
    """

    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    category: str | None = None
    brands: str | None = None
    colors: list[ColorInput] = []


class ProductPatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    category: str | None = None
    brands: str | None = None
    colors: list[ColorInput] | None = None

    @field_validator("name")
    @classmethod
    def reject_null_name(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class CategoryOutput(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


class BrandOutput(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


class ProductOutput(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float | None = None
    stock: int | None = None
    category: CategoryOutput | None = None
    brands: BrandOutput | None = Field(default=None, validation_alias="brand")
    colors: list[ColorOutput] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
        populate_by_name = True


class ProductListOutput(BaseModel):
    data: list[ProductOutput]
    count: int


class MessageOutput(BaseModel):
    message: str
