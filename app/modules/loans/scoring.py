"""
Advisory AI score for loan applications.

The score is a heuristic in [0, 100] built from the farmer's credit score,
land size and the requested amount. It is stored on the loan at creation and
never gates approval.
"""
from typing import Optional

BASE_SCORE = 50
MAX_SCORE = 100

SMALL_LOAN_LIMIT = 100000


def _credit_bonus(credit_score: Optional[float]) -> int:
    if credit_score is None:
        return 0
    if credit_score > 700:
        return 20
    if credit_score > 600:
        return 10
    return 0


def _land_bonus(land_size: Optional[float]) -> int:
    if land_size is None:
        return 0
    if land_size > 5:
        return 15
    if land_size > 2:
        return 10
    return 0


def _amount_bonus(loan_amount: Optional[float]) -> int:
    if loan_amount is not None and loan_amount < SMALL_LOAN_LIMIT:
        return 15
    return 0


def calculate_ai_score(
    credit_score: Optional[float],
    land_size: Optional[float],
    loan_amount: Optional[float]
) -> int:
    """
    Score a loan request.

    >>> calculate_ai_score(750, 6, 50000)
    100
    >>> calculate_ai_score(650, 3, 200000)
    70
    """
    score = (
        BASE_SCORE
        + _credit_bonus(credit_score)
        + _land_bonus(land_size)
        + _amount_bonus(loan_amount)
    )
    return min(score, MAX_SCORE)
