from pydantic import EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.core.responses import CamelModel
from app.modules.farmers.models import CropType, FarmerLoanStatus


class Address(CamelModel):
    village: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None


class FarmerBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., pattern=r"^[0-9]{10}$")
    address: Optional[Address] = None
    land_size: float = Field(..., ge=0)
    crop_type: CropType = CropType.OTHER
    credit_score: int = Field(500, ge=300, le=900)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Farmer name is required")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()


class FarmerCreate(FarmerBase):
    """Registration payload; loanStatus is owned by the loan workflow"""
    pass


class FarmerUpdate(CamelModel):
    """Partial update; every supplied field is re-validated"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=r"^[0-9]{10}$")
    address: Optional[Address] = None
    land_size: Optional[float] = Field(None, ge=0)
    crop_type: Optional[CropType] = None
    credit_score: Optional[int] = Field(None, ge=300, le=900)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Farmer name is required")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower() if v else v


class RecommendationCreate(CamelModel):
    text: str = Field(..., min_length=1)


class RecommendationResponse(CamelModel):
    text: str
    timestamp: datetime


class FarmerSummary(CamelModel):
    """Farmer fields embedded in loan responses"""
    id: int
    name: str
    email: str
    phone: str
    loan_status: FarmerLoanStatus


class FarmerResponse(FarmerBase):
    id: int
    email: str
    loan_status: FarmerLoanStatus
    ai_recommendations: List[RecommendationResponse] = []
    created_at: datetime
    updated_at: datetime
