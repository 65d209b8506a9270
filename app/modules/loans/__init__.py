# Loans module
from app.modules.loans.models import Loan, LoanPurpose, LoanStatus
from app.modules.loans.scoring import calculate_ai_score
from app.modules.loans.services import LoanService
from app.modules.loans.router import router

__all__ = [
    "Loan", "LoanPurpose", "LoanStatus",
    "calculate_ai_score", "LoanService", "router"
]
