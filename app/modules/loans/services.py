from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from typing import Dict, FrozenSet, List, Optional
import logging

from app.core.database import utcnow
from app.core.exceptions import NotFoundError, ValidationError
from app.modules.farmers.models import Farmer, FarmerLoanStatus
from app.modules.loans.models import Loan, LoanStatus
from app.modules.loans.schemas import LoanCreate
from app.modules.loans.scoring import calculate_ai_score

logger = logging.getLogger(__name__)

# Legal lifecycle; Rejected and Closed are terminal
ALLOWED_TRANSITIONS: Dict[LoanStatus, FrozenSet[LoanStatus]] = {
    LoanStatus.PENDING: frozenset({LoanStatus.APPROVED, LoanStatus.REJECTED}),
    LoanStatus.APPROVED: frozenset({LoanStatus.DISBURSED}),
    LoanStatus.DISBURSED: frozenset({LoanStatus.CLOSED}),
    LoanStatus.REJECTED: frozenset(),
    LoanStatus.CLOSED: frozenset(),
}

# Loan status -> farmer summary status
FARMER_STATUS_MIRROR: Dict[LoanStatus, FarmerLoanStatus] = {
    LoanStatus.APPROVED: FarmerLoanStatus.APPROVED,
    LoanStatus.DISBURSED: FarmerLoanStatus.ACTIVE,
    LoanStatus.REJECTED: FarmerLoanStatus.REJECTED,
    LoanStatus.CLOSED: FarmerLoanStatus.CLOSED,
}


def parse_status(value: str) -> LoanStatus:
    try:
        return LoanStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in LoanStatus)
        raise ValidationError("Invalid loan status", f"'{value}' is not one of: {allowed}")


def check_transition(current: LoanStatus, target: LoanStatus) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise ValidationError(
            "Invalid status transition",
            f"Cannot move a loan from {current.value} to {target.value}"
        )


class LoanService:
    """Loan workflow: application, scoring and status lifecycle"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_loan(self, loan_id: int, for_update: bool = False) -> Optional[Loan]:
        query = (
            select(Loan)
            .where(Loan.id == loan_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_loan_or_404(self, loan_id: int, for_update: bool = False) -> Loan:
        loan = await self.get_loan(loan_id, for_update=for_update)
        if loan is None:
            raise NotFoundError("Loan not found")
        return loan

    async def get_loans(
        self,
        farmer_id: Optional[int] = None,
        status: Optional[LoanStatus] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Loan]:
        query = select(Loan)
        if farmer_id is not None:
            query = query.where(Loan.farmer_id == farmer_id)
        if status is not None:
            query = query.where(Loan.status == status)

        query = query.order_by(Loan.applied_date.desc(), Loan.id.desc()).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _get_farmer(self, farmer_id: int) -> Optional[Farmer]:
        result = await self.db.execute(select(Farmer).where(Farmer.id == farmer_id))
        return result.scalar_one_or_none()

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Loan write rejected by store: {e.orig}")
            raise ValidationError("Validation Error", "Loan could not be saved")

    async def apply_loan(self, loan_in: LoanCreate) -> Loan:
        """
        Create a loan application.

        The farmer must exist. The AI score is computed once here. The new
        loan and the farmer's "Applied" status are committed together.
        """
        farmer = await self._get_farmer(loan_in.farmer_id)
        if farmer is None:
            raise NotFoundError("Farmer not found")

        ai_score = calculate_ai_score(farmer.credit_score, farmer.land_size, loan_in.loan_amount)

        loan = Loan(
            farmer_id=farmer.id,
            loan_amount=loan_in.loan_amount,
            interest_rate=loan_in.interest_rate,
            tenure=loan_in.tenure,
            purpose=loan_in.purpose,
            status=LoanStatus.PENDING,
            applied_date=utcnow(),
            ai_score=ai_score
        )
        self.db.add(loan)
        farmer.loan_status = FarmerLoanStatus.APPLIED
        await self._commit()

        logger.info(f"Loan {loan.id} created for farmer {farmer.id} with AI score {ai_score}")
        return await self.get_loan(loan.id)

    async def update_loan_status(self, loan_id: int, new_status: str) -> Loan:
        """
        Move a loan along its lifecycle and mirror the result onto the farmer.

        Approved stamps approval_date, Disbursed stamps disbursement_date.
        If the farmer has been removed the mirror is skipped and the loan
        update still goes through.
        """
        # Row lock serialises concurrent transitions of the same loan
        loan = await self.get_loan_or_404(loan_id, for_update=True)
        target = parse_status(new_status)
        previous = loan.status
        check_transition(previous, target)

        loan.status = target
        if target == LoanStatus.APPROVED:
            loan.approval_date = utcnow()
        elif target == LoanStatus.DISBURSED:
            loan.disbursement_date = utcnow()

        farmer = await self._get_farmer(loan.farmer_id)
        if farmer is not None:
            farmer.loan_status = FARMER_STATUS_MIRROR[target]
        else:
            logger.warning(f"Farmer {loan.farmer_id} for loan {loan.id} no longer exists, mirror skipped")

        await self._commit()

        logger.info(f"Loan {loan.id} moved from {previous.value} to {target.value}")
        return await self.get_loan(loan.id)
