"""Tests for the engine exception hierarchy."""

from datetime import date

import pytest

from eligibility_core.exceptions import (
    CatalogMissingError,
    ConfigurationError,
    EligibilityError,
    ExternalServiceError,
    InvalidInputError,
)


class TestEligibilityError:
    """Test suite for the base error."""

    def test_str_is_message(self):
        error = EligibilityError("Something failed", details={"a": 1})
        assert str(error) == "Something failed"

    def test_repr_includes_details(self):
        error = EligibilityError("Something failed", details={"a": 1}, recoverable=True)
        assert repr(error) == (
            "EligibilityError(message='Something failed', details={'a': 1}, recoverable=True)"
        )

    @pytest.mark.parametrize(
        "error_class",
        [InvalidInputError, CatalogMissingError, ExternalServiceError, ConfigurationError],
    )
    def test_all_errors_share_base(self, error_class):
        assert issubclass(error_class, EligibilityError)


class TestSubclassContext:
    """Keyword context lands in details."""

    def test_invalid_input(self):
        error = InvalidInputError("bad", field="household_size", value=0, constraint=">= 1")

        assert error.details == {"field": "household_size", "value": 0, "constraint": ">= 1"}
        assert error.recoverable is False

    def test_catalog_missing(self):
        error = CatalogMissingError(
            "missing",
            jurisdiction="MD",
            program="SNAP",
            household_size=3,
            as_of=date(2020, 1, 1),
        )

        assert error.details == {
            "jurisdiction": "MD",
            "program": "SNAP",
            "household_size": 3,
            "as_of": "2020-01-01",
        }

    def test_external_service_is_recoverable(self):
        error = ExternalServiceError("timed out", service="calc", operation="calculate", api_error="timeout")

        assert error.recoverable is True
        assert error.details["api_error"] == "timeout"

    def test_configuration(self):
        error = ConfigurationError("bad order", config_key="k", expected="a, b", actual="b, a")
        assert error.details == {"config_key": "k", "expected": "a, b", "actual": "b, a"}
