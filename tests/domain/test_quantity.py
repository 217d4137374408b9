"""Unit tests for the Quantity value object."""

import pytest

from fbo.domain.exceptions import InvalidOrderError
from fbo.domain.model.value_objects import Quantity


class TestQuantityParse:

    @pytest.mark.parametrize("raw, expected", [(3, 3), ("4", 4), (" 7 ", 7), (2.0, 2), ("5.0", 5)])
    def test_accepts_integral_values(self, raw, expected):
        assert Quantity.parse(raw).value == expected

    @pytest.mark.parametrize("raw", [None, 0, -1, "0", "-2", "abc", "", 1.5, "2.5", True, False, [1]])
    def test_rejects_everything_else(self, raw):
        with pytest.raises(InvalidOrderError) as info:
            Quantity.parse(raw)
        assert info.value.code == "invalid_order"

    def test_direct_construction_validates(self):
        with pytest.raises(InvalidOrderError):
            Quantity(0)

    def test_frozen(self):
        q = Quantity(5)
        with pytest.raises(AttributeError):
            q.value = 10  # type: ignore[misc]
