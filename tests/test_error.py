"""
Tests for the error hierarchy and error code tables.
"""

import pytest

from calculator import error as E


class TestHierarchy:

    def test_attributes(self):
        err = E.InvalidExpression("Unbalanced brackets", code="3002", equation="(1")
        assert str(err) == "Unbalanced brackets"
        assert err.message == "Unbalanced brackets"
        assert err.code == "3002"
        assert err.equation == "(1"

    def test_default_code(self):
        assert E.MathError("boom").code == "9999"

    def test_division_by_zero_is_distinct(self):
        assert issubclass(E.DivisionByZero, E.MathError)
        assert not issubclass(E.DivisionByZero, E.InvalidExpression)


class TestMessages:

    @pytest.mark.parametrize("code", [
        "3000", "3001", "3002", "3003", "3004", "3005",
        "3006", "3007", "3008", "3009", "9999",
    ])
    def test_engine_codes_have_messages(self, code):
        assert E.describe(code) == E.ERROR_MESSAGES[code]

    def test_unknown_code(self):
        assert E.describe("1234") == "Unknown error"

    def test_codes_map_to_error_areas(self):
        for code in E.ERROR_MESSAGES:
            assert len(code) == 4
            assert code[0] in E.Error_Dictionary

    def test_area_names(self):
        assert E.Error_Dictionary["3"] == "Calculator Error"
        assert E.Error_Dictionary["7"] == "Runtime Error"
        assert E.Error_Dictionary["9"] == "Unexpected Error"
