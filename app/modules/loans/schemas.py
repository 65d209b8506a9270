from pydantic import Field
from datetime import datetime
from typing import Optional

from app.core.responses import CamelModel
from app.modules.farmers.schemas import FarmerSummary
from app.modules.loans.models import LoanPurpose, LoanStatus


class LoanBase(CamelModel):
    loan_amount: float = Field(..., ge=1000)
    interest_rate: float = Field(..., ge=0, le=100)
    tenure: int = Field(..., ge=1)
    purpose: LoanPurpose


class LoanCreate(LoanBase):
    farmer_id: int


class LoanStatusUpdate(CamelModel):
    # Matched against LoanStatus by the workflow
    status: str = Field(..., min_length=1)


class LoanResponse(LoanBase):
    id: int
    farmer_id: int
    status: LoanStatus
    applied_date: datetime
    approval_date: Optional[datetime] = None
    disbursement_date: Optional[datetime] = None
    ai_score: int
    created_at: datetime
    updated_at: datetime
    farmer: Optional[FarmerSummary] = None
