from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from typing import Any, Dict, List, Optional
import logging

from app.core.exceptions import NotFoundError, ValidationError
from app.modules.products.models import Product, ProductCategory, ProductStatus
from app.modules.products.schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def _to_columns(values: Dict[str, Any]) -> Dict[str, Any]:
    """JSON columns store plain strings"""
    if values.get("delivery_options") is not None:
        values["delivery_options"] = [option.value for option in values["delivery_options"]]
    return values


class ProductService:
    """Marketplace listings: CRUD, moderation status and engagement counters"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_product(self, product_id: int) -> Optional[Product]:
        query = (
            select(Product)
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_product_or_404(self, product_id: int) -> Product:
        product = await self.get_product(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    async def get_products(
        self,
        category: Optional[ProductCategory] = None,
        state: Optional[str] = None,
        district: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        status: Optional[ProductStatus] = None
    ) -> List[Product]:
        """List listings, newest first; state/district match case-insensitively"""
        query = select(Product)

        if category:
            query = query.where(Product.category == category)
        if state:
            query = query.where(Product.state.ilike(f"%{state}%"))
        if district:
            query = query.where(Product.district.ilike(f"%{district}%"))
        if status:
            query = query.where(Product.status == status)
        if min_price is not None:
            query = query.where(Product.price >= min_price)
        if max_price is not None:
            query = query.where(Product.price <= max_price)

        query = query.order_by(Product.created_at.desc(), Product.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_product(self, data: ProductCreate, seller_id: Optional[int] = None) -> Product:
        product = Product(**_to_columns(data.model_dump()), seller_id=seller_id)
        self.db.add(product)
        await self.db.commit()

        logger.info(f"Product {product.id} listed ({product.category.value})")
        return await self.get_product(product.id)

    async def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        product = await self.get_product_or_404(product_id)

        update_data = _to_columns(data.model_dump(exclude_unset=True))
        nullable = {"description", "contact_email"}
        for field, value in update_data.items():
            if value is None and field not in nullable:
                raise ValidationError("Validation Error", f"{field} cannot be null")

        for field, value in update_data.items():
            setattr(product, field, value)

        await self.db.commit()
        return await self.get_product(product_id)

    async def delete_product(self, product_id: int) -> None:
        product = await self.get_product_or_404(product_id)
        await self.db.delete(product)
        await self.db.commit()
        logger.info(f"Product {product_id} deleted")

    async def update_status(self, product_id: int, new_status: str) -> Product:
        try:
            target = ProductStatus(new_status)
        except ValueError:
            raise ValidationError("Invalid status")

        product = await self.get_product_or_404(product_id)
        product.status = target
        await self.db.commit()
        return await self.get_product(product_id)

    async def _increment(self, product_id: int, column) -> Product:
        result = await self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values({column: column + 1})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError("Product not found")

        await self.db.commit()
        return await self.get_product(product_id)

    async def record_view(self, product_id: int) -> Product:
        return await self._increment(product_id, Product.views)

    async def record_inquiry(self, product_id: int) -> Product:
        return await self._increment(product_id, Product.inquiries)
