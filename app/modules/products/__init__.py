# Products module
from app.modules.products.models import (
    Product, ProductCategory, ProductUnit, DeliveryOption, ProductStatus
)
from app.modules.products.router import router

__all__ = [
    "Product", "ProductCategory", "ProductUnit", "DeliveryOption", "ProductStatus",
    "router"
]
