from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.responses import APIResponse
from app.modules.farmers.schemas import FarmerCreate, FarmerUpdate, FarmerResponse, RecommendationCreate
from app.modules.farmers.services import FarmerService

router = APIRouter(prefix="/api/farmers", tags=["farmers"])


@router.get("", response_model=APIResponse[List[FarmerResponse]])
async def read_farmers(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db)
):
    farmers = await FarmerService(db).get_farmers(skip=skip, limit=limit)
    return APIResponse(
        count=len(farmers),
        data=[FarmerResponse.model_validate(f) for f in farmers]
    )


@router.get("/{farmer_id}", response_model=APIResponse[FarmerResponse])
async def read_farmer(farmer_id: int, db: AsyncSession = Depends(get_db)):
    farmer = await FarmerService(db).get_farmer_or_404(farmer_id)
    return APIResponse(data=FarmerResponse.model_validate(farmer))


@router.post("", response_model=APIResponse[FarmerResponse], status_code=status.HTTP_201_CREATED)
async def create_farmer(farmer_in: FarmerCreate, db: AsyncSession = Depends(get_db)):
    farmer = await FarmerService(db).create_farmer(farmer_in)
    return APIResponse(
        message="Farmer registered successfully",
        data=FarmerResponse.model_validate(farmer)
    )


@router.put("/{farmer_id}", response_model=APIResponse[FarmerResponse])
async def update_farmer(
    farmer_id: int,
    farmer_in: FarmerUpdate,
    db: AsyncSession = Depends(get_db)
):
    farmer = await FarmerService(db).update_farmer(farmer_id, farmer_in)
    return APIResponse(
        message="Farmer updated successfully",
        data=FarmerResponse.model_validate(farmer)
    )


@router.delete("/{farmer_id}", response_model=APIResponse)
async def delete_farmer(farmer_id: int, db: AsyncSession = Depends(get_db)):
    await FarmerService(db).delete_farmer(farmer_id)
    return APIResponse(message="Farmer deleted successfully")


@router.post(
    "/{farmer_id}/recommendations",
    response_model=APIResponse[FarmerResponse],
    status_code=status.HTTP_201_CREATED
)
async def add_recommendation(
    farmer_id: int,
    recommendation: RecommendationCreate,
    db: AsyncSession = Depends(get_db)
):
    """Append an AI advisory note to the farmer's recommendations"""
    farmer = await FarmerService(db).add_recommendation(farmer_id, recommendation)
    return APIResponse(
        message="Recommendation added",
        data=FarmerResponse.model_validate(farmer)
    )
