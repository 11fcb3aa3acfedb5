"""
Image id and reorder field parsing tests.
"""
from __future__ import annotations

import pytest

from app.core.exceptions import ValidationException
from app.schemas.superhero_image import ImageOrder, parse_image_ids, parse_image_orders


class TestParseImageIds:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, []),
            ("", []),
            ("[5, 6]", [5, 6]),
            ("5,6", [5, 6]),
            (["5", "6"], [5, 6]),
            (["[5, 6]"], [5, 6]),
            ([5, 6, 5], [5, 6]),
        ],
    )
    def test_accepted_forms(self, raw: object, expected: list[int]) -> None:
        assert parse_image_ids(raw) == expected  # type: ignore[arg-type]

    @pytest.mark.parametrize("raw", ["[5, ", "five", "[-1]", "0", ["abc"], [0], [True]])
    def test_malformed_input_is_rejected(self, raw: object) -> None:
        with pytest.raises(ValidationException):
            parse_image_ids(raw)  # type: ignore[arg-type]


class TestParseImageOrders:
    def test_json_array(self) -> None:
        orders = parse_image_orders('[{"id": 3, "order": 0}, {"id": 1, "order": 1}]')
        assert orders == [ImageOrder(id=3, order=0), ImageOrder(id=1, order=1)]

    def test_blank_means_no_reordering(self) -> None:
        assert parse_image_orders(None) == []
        assert parse_image_orders("  ") == []

    @pytest.mark.parametrize(
        "raw",
        ['{"id": 1}', '[{"id": 1, "order": -1}]', "not json", '[{"id": 1, "order": 0}, {"id": 1, "order": 2}]'],
    )
    def test_invalid_orders_are_rejected(self, raw: str) -> None:
        with pytest.raises(ValidationException):
            parse_image_orders(raw)
