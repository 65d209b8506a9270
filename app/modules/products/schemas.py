from pydantic import Field, field_validator
from datetime import datetime
from typing import List, Optional

from app.core.responses import CamelModel
from app.modules.products.models import ProductCategory, ProductUnit, DeliveryOption, ProductStatus


def _strip_required(v):
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Field cannot be blank")
    return v


def _dedupe(options):
    if options is None:
        return options
    seen = []
    for option in options:
        if option not in seen:
            seen.append(option)
    return seen


class ProductBase(CamelModel):
    product_name: str = Field(..., min_length=1, max_length=200)
    category: ProductCategory
    quantity: float = Field(..., ge=0)
    unit: ProductUnit = ProductUnit.KG
    price: float = Field(..., ge=0)
    description: Optional[str] = None
    location: str = Field(..., min_length=1, max_length=200)
    district: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    pincode: str = Field(..., pattern=r"^\d{6}$")
    contact_name: str = Field(..., min_length=1, max_length=100)
    contact_phone: str = Field(..., min_length=1, max_length=20)
    contact_email: Optional[str] = None
    delivery_options: List[DeliveryOption] = []
    organic_certified: bool = False
    images: List[str] = []

    @field_validator("product_name", "location", "district", "state", "contact_name", "contact_phone")
    @classmethod
    def strip_text(cls, v):
        return _strip_required(v)

    @field_validator("contact_email")
    @classmethod
    def lowercase_email(cls, v):
        return v.strip().lower() if v else v

    @field_validator("delivery_options")
    @classmethod
    def unique_options(cls, v):
        return _dedupe(v)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    """Partial update of a listing; status changes go through the status endpoint"""
    product_name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[ProductCategory] = None
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[ProductUnit] = None
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    district: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    pincode: Optional[str] = Field(None, pattern=r"^\d{6}$")
    contact_name: Optional[str] = Field(None, min_length=1, max_length=100)
    contact_phone: Optional[str] = Field(None, min_length=1, max_length=20)
    contact_email: Optional[str] = None
    delivery_options: Optional[List[DeliveryOption]] = None
    organic_certified: Optional[bool] = None
    images: Optional[List[str]] = None

    @field_validator("product_name", "location", "district", "state", "contact_name", "contact_phone")
    @classmethod
    def strip_text(cls, v):
        return _strip_required(v)

    @field_validator("contact_email")
    @classmethod
    def lowercase_email(cls, v):
        return v.strip().lower() if v else v

    @field_validator("delivery_options")
    @classmethod
    def unique_options(cls, v):
        return _dedupe(v)


class ProductStatusUpdate(CamelModel):
    # Checked against ProductStatus by the service
    status: str


class SellerSummary(CamelModel):
    id: int
    name: str
    email: str


class ProductResponse(ProductBase):
    id: int
    status: ProductStatus
    seller_id: Optional[int] = None
    seller: Optional[SellerSummary] = None
    views: int
    inquiries: int
    created_at: datetime
    updated_at: datetime
