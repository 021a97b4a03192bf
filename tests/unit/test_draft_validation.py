"""Unit tests for listing draft validation."""

import pytest

from src.ns_common.errors import ValidationError
from src.ns_listing.domain.validation import validate_draft
from tests.factories import make_draft


def _fields(exc_info) -> set[str]:
    return {e["field"] for e in exc_info.value.errors}


class TestValidateDraft:
    def test_valid_draft(self) -> None:
        validate_draft(make_draft())

    def test_explicit_active_status_allowed(self) -> None:
        validate_draft(make_draft(status="active"))

    def test_non_numeric_amount(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_draft(make_draft(loan_amount="abc"))
        assert _fields(exc_info) == {"loanAmount"}

    def test_negative_collateral(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_draft(make_draft(collateral_amount="-1"))
        assert _fields(exc_info) == {"collateralAmount"}

    def test_blank_token_symbol(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_draft(make_draft(loan_token="  "))
        assert _fields(exc_info) == {"loanToken"}

    @pytest.mark.parametrize("term", [0, -5])
    def test_non_positive_term(self, term: int) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_draft(make_draft(term_days=term))
        assert _fields(exc_info) == {"termDays"}

    def test_bool_term_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_draft(make_draft(term_days=True))

    def test_non_active_initial_status(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_draft(make_draft(status="purchased"))
        assert _fields(exc_info) == {"status"}

    def test_collects_every_problem(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_draft(make_draft(apr="x", creator="", token_address="", term_days=0))
        assert _fields(exc_info) == {"apr", "creator", "tokenAddress", "termDays"}

    def test_unknown_symbol_accepted(self) -> None:
        validate_draft(make_draft(loan_token="BONK"))
