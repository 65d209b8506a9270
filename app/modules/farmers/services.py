from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
import logging

from app.core.exceptions import NotFoundError, ValidationError
from app.modules.farmers.models import Farmer, FarmerRecommendation
from app.modules.farmers.schemas import FarmerCreate, FarmerUpdate, RecommendationCreate
from app.modules.loans.models import Loan

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Email or phone already exists"


class FarmerService:
    """CRUD for farmer profiles"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_farmer(self, farmer_id: int) -> Optional[Farmer]:
        query = (
            select(Farmer)
            .where(Farmer.id == farmer_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_farmer_or_404(self, farmer_id: int) -> Farmer:
        farmer = await self.get_farmer(farmer_id)
        if farmer is None:
            raise NotFoundError("Farmer not found")
        return farmer

    async def get_farmers(self, skip: int = 0, limit: int = 100) -> List[Farmer]:
        query = select(Farmer).order_by(Farmer.id).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _ensure_unique(self, email: Optional[str], phone: Optional[str], exclude_id: Optional[int] = None):
        conditions = []
        if email:
            conditions.append(Farmer.email == email)
        if phone:
            conditions.append(Farmer.phone == phone)
        if not conditions:
            return

        query = select(Farmer.id).where(or_(*conditions))
        if exclude_id is not None:
            query = query.where(Farmer.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ValidationError(DUPLICATE_MESSAGE)

    async def _commit(self):
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Farmer write rejected by store: {e.orig}")
            raise ValidationError(DUPLICATE_MESSAGE)

    async def create_farmer(self, data: FarmerCreate) -> Farmer:
        await self._ensure_unique(data.email, data.phone)

        farmer = Farmer(**data.model_dump(exclude_none=True))
        self.db.add(farmer)
        await self._commit()

        logger.info(f"Farmer {farmer.id} registered")
        return await self.get_farmer(farmer.id)

    async def update_farmer(self, farmer_id: int, data: FarmerUpdate) -> Farmer:
        farmer = await self.get_farmer_or_404(farmer_id)

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None and field != "address":
                raise ValidationError("Validation Error", f"{field} cannot be null")

        await self._ensure_unique(update_data.get("email"), update_data.get("phone"), exclude_id=farmer_id)

        for field, value in update_data.items():
            setattr(farmer, field, value)

        await self._commit()
        return await self.get_farmer(farmer_id)

    async def delete_farmer(self, farmer_id: int) -> None:
        """Hard delete; refused while loan applications reference the farmer"""
        farmer = await self.get_farmer_or_404(farmer_id)

        result = await self.db.execute(
            select(func.count(Loan.id)).where(Loan.farmer_id == farmer_id)
        )
        loan_count = result.scalar()
        if loan_count:
            raise ValidationError(
                "Cannot delete farmer with existing loan applications",
                f"{loan_count} loan(s) reference this farmer"
            )

        await self.db.delete(farmer)
        await self.db.commit()
        logger.info(f"Farmer {farmer_id} deleted")

    async def add_recommendation(self, farmer_id: int, data: RecommendationCreate) -> Farmer:
        farmer = await self.get_farmer_or_404(farmer_id)
        self.db.add(FarmerRecommendation(farmer_id=farmer.id, text=data.text))
        await self.db.commit()
        return await self.get_farmer(farmer_id)
