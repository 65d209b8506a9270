from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.responses import APIResponse
from app.modules.loans.models import LoanStatus
from app.modules.loans.schemas import LoanCreate, LoanResponse, LoanStatusUpdate
from app.modules.loans.services import LoanService

router = APIRouter(prefix="/api/loans", tags=["loans"])


@router.get("", response_model=APIResponse[List[LoanResponse]])
async def read_loans(
    farmer_id: Optional[int] = Query(None, alias="farmerId"),
    loan_status: Optional[LoanStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db)
):
    loans = await LoanService(db).get_loans(farmer_id=farmer_id, status=loan_status, skip=skip, limit=limit)
    return APIResponse(
        count=len(loans),
        data=[LoanResponse.model_validate(loan) for loan in loans]
    )


@router.get("/{loan_id}", response_model=APIResponse[LoanResponse])
async def read_loan(loan_id: int, db: AsyncSession = Depends(get_db)):
    loan = await LoanService(db).get_loan_or_404(loan_id)
    return APIResponse(data=LoanResponse.model_validate(loan))


@router.post("", response_model=APIResponse[LoanResponse], status_code=status.HTTP_201_CREATED)
async def apply_loan(loan_in: LoanCreate, db: AsyncSession = Depends(get_db)):
    """
    Submit a loan application.

    - Farmer must exist (404 otherwise)
    - AI score is computed from the farmer profile and the requested amount
    - Farmer loan status becomes "Applied"
    """
    loan = await LoanService(db).apply_loan(loan_in)
    return APIResponse(
        message="Loan application submitted successfully",
        data=LoanResponse.model_validate(loan)
    )


@router.patch("/{loan_id}/status", response_model=APIResponse[LoanResponse])
async def update_loan_status(
    loan_id: int,
    status_in: LoanStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Approve, reject, disburse or close a loan"""
    loan = await LoanService(db).update_loan_status(loan_id, status_in.status)
    return APIResponse(
        message=f"Loan {loan.status.value.lower()} successfully",
        data=LoanResponse.model_validate(loan)
    )
