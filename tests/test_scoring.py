"""
Unit tests for the loan AI score
"""
import itertools

import pytest

from app.modules.loans.scoring import calculate_ai_score


CREDIT_SCORES = [None, 300, 600, 601, 650, 700, 701, 750, 900]
LAND_SIZES = [None, 0, 1, 2, 2.5, 3, 5, 5.5, 10]
LOAN_AMOUNTS = [None, 1000, 50000, 99999, 100000, 200000, 500000]


def expected_score(credit_score, land_size, loan_amount):
    credit = 20 if (credit_score or 0) > 700 else 10 if (credit_score or 0) > 600 else 0
    land = 15 if (land_size or 0) > 5 else 10 if (land_size or 0) > 2 else 0
    amount = 15 if loan_amount is not None and loan_amount < 100000 else 0
    return min(50 + credit + land + amount, 100)


class TestAIScoreExamples:
    """Worked examples"""

    @pytest.mark.unit
    def test_all_bonuses_capped_at_100(self):
        assert calculate_ai_score(750, 6, 50000) == 100

    @pytest.mark.unit
    def test_middle_bands(self):
        assert calculate_ai_score(650, 3, 200000) == 70

    @pytest.mark.unit
    def test_no_bonuses(self):
        assert calculate_ai_score(400, 1, 500000) == 50

    @pytest.mark.unit
    def test_end_to_end_farmer_profile(self):
        # creditScore 720, landSize 4, loanAmount 80000
        assert calculate_ai_score(720, 4, 80000) == 95

    @pytest.mark.unit
    def test_band_edges_are_exclusive(self):
        assert calculate_ai_score(700, 5, 100000) == 50 + 10 + 10
        assert calculate_ai_score(600, 2, 100000) == 50

    @pytest.mark.unit
    def test_missing_inputs_fall_through(self):
        assert calculate_ai_score(None, None, None) == 50


class TestAIScoreProperties:
    """Bounds and determinism over a grid of inputs"""

    @pytest.mark.unit
    def test_score_matches_formula_and_bounds(self):
        for credit, land, amount in itertools.product(CREDIT_SCORES, LAND_SIZES, LOAN_AMOUNTS):
            score = calculate_ai_score(credit, land, amount)
            assert 50 <= score <= 100
            assert score == expected_score(credit, land, amount)

    @pytest.mark.unit
    def test_deterministic(self):
        for credit, land, amount in itertools.product(CREDIT_SCORES, LAND_SIZES, LOAN_AMOUNTS):
            assert calculate_ai_score(credit, land, amount) == calculate_ai_score(credit, land, amount)

    @pytest.mark.unit
    def test_returns_int(self):
        assert isinstance(calculate_ai_score(720.5, 4.2, 80000.0), int)
