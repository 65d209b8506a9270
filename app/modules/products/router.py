from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.dependencies import get_optional_user
from app.core.responses import APIResponse
from app.modules.users.models import User
from app.modules.products.models import ProductCategory, ProductStatus
from app.modules.products.schemas import ProductCreate, ProductUpdate, ProductResponse, ProductStatusUpdate
from app.modules.products.services import ProductService

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=APIResponse[List[ProductResponse]])
async def read_products(
    category: Optional[ProductCategory] = None,
    state: Optional[str] = None,
    district: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    product_status: Optional[ProductStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db)
):
    """List listings with optional filters (no status filter by default)"""
    products = await ProductService(db).get_products(
        category=category,
        state=state,
        district=district,
        min_price=min_price,
        max_price=max_price,
        status=product_status
    )
    return APIResponse(
        count=len(products),
        data=[ProductResponse.model_validate(p) for p in products]
    )


@router.get("/{product_id}", response_model=APIResponse[ProductResponse])
async def read_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await ProductService(db).get_product_or_404(product_id)
    return APIResponse(data=ProductResponse.model_validate(product))


@router.post("", response_model=APIResponse[ProductResponse], status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: ProductCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Create a listing; the seller is taken from the bearer token when present"""
    seller_id = current_user.id if current_user else None
    product = await ProductService(db).create_product(product_in, seller_id=seller_id)
    return APIResponse(
        message="Product listed successfully",
        data=ProductResponse.model_validate(product)
    )


@router.put("/{product_id}", response_model=APIResponse[ProductResponse])
async def update_product(
    product_id: int,
    product_in: ProductUpdate,
    db: AsyncSession = Depends(get_db)
):
    product = await ProductService(db).update_product(product_id, product_in)
    return APIResponse(
        message="Product updated successfully",
        data=ProductResponse.model_validate(product)
    )


@router.delete("/{product_id}", response_model=APIResponse)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    await ProductService(db).delete_product(product_id)
    return APIResponse(message="Product deleted successfully")


@router.patch("/{product_id}/status", response_model=APIResponse[ProductResponse])
async def update_product_status(
    product_id: int,
    status_in: ProductStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    product = await ProductService(db).update_status(product_id, status_in.status)
    return APIResponse(
        message=f"Product {product.status.value} successfully",
        data=ProductResponse.model_validate(product)
    )


@router.post("/{product_id}/inquiry", response_model=APIResponse[ProductResponse])
async def record_inquiry(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await ProductService(db).record_inquiry(product_id)
    return APIResponse(message="Inquiry recorded", data=ProductResponse.model_validate(product))


@router.post("/{product_id}/view", response_model=APIResponse[ProductResponse])
async def record_view(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await ProductService(db).record_view(product_id)
    return APIResponse(message="View recorded", data=ProductResponse.model_validate(product))
