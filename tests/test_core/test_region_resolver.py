"""RegionResolver Tests
====================

Unit tests for `Region` and `resolve_regions`.

This module verifies that:

1. An empty selection resolves to the whole buffer.
2. Selections are accepted as objects with ``regions()``, plain sequences of
   pairs, or `Region` values. Non-integer bounds are rejected, never
   truncated.
3. The ``merge`` strategy sorts and merges strictly overlapping regions but
   keeps touching and malformed regions apart.
4. The ``as_given`` strategy returns regions untouched.
5. The strategy is read from configuration with a safe fallback.
"""

import logging
from types import SimpleNamespace

import pytest

from recase.core.Errors import InvalidRegionError
from recase.core.RegionResolver import (
    OverlapStrategy,
    Region,
    get_overlap_strategy,
    merge_regions,
    resolve_regions,
)
from tests.stubs import StubSelection


class TestRegion:
    """Grouped tests for the `Region` value type."""

    def test_coerce(self) -> None:
        region = Region(1, 4)
        assert Region.coerce(region) is region
        assert Region.coerce((2, 5)) == Region(2, 5)
        assert Region.coerce([0, 0]) == Region(0, 0)
        assert Region.coerce(SimpleNamespace(start=3, end=8)) == Region(3, 8)

    @pytest.mark.parametrize(
        "value",
        [(0, 2.7), (0.0, 3), ("1", "4"), SimpleNamespace(start=0, end=None)],
    )
    def test_coerce_rejects_non_integer_bounds(self, value) -> None:
        with pytest.raises(TypeError):
            Region.coerce(value)

    def test_constructor_rejects_non_integer_bounds(self) -> None:
        with pytest.raises(TypeError, match="integers"):
            Region(0, 2.5)

    def test_size_and_empty(self) -> None:
        assert Region(3, 7).size == 4
        assert Region(3, 3).empty
        assert not Region(3, 4).empty

    @pytest.mark.parametrize(
        "region, length, valid",
        [
            (Region(0, 0), 0, True),
            (Region(0, 5), 5, True),
            (Region(2, 2), 5, True),
            (Region(0, 6), 5, False),
            (Region(4, 2), 5, False),
            (Region(-1, 2), 5, False),
        ],
    )
    def test_is_valid_for(self, region: Region, length: int, valid: bool) -> None:
        assert region.is_valid_for(length) is valid

    def test_overlaps(self) -> None:
        assert Region(0, 5).overlaps(Region(4, 8))
        assert not Region(0, 5).overlaps(Region(5, 8))
        assert Region(0, 5).union(Region(3, 9)) == Region(0, 9)


class TestResolveRegions:
    """Grouped tests for `resolve_regions`."""

    @pytest.mark.parametrize("selection", [None, [], StubSelection()])
    def test_empty_selection_targets_whole_buffer(self, selection) -> None:
        assert resolve_regions(selection, 12) == [Region(0, 12)]

    def test_empty_selection_on_empty_buffer(self) -> None:
        assert resolve_regions(None, 0) == [Region(0, 0)]

    def test_selection_object_with_pairs(self) -> None:
        selection = StubSelection((0, 20), (74, 76))
        assert resolve_regions(selection, 76) == [Region(0, 20), Region(74, 76)]

    def test_plain_sequence(self) -> None:
        assert resolve_regions([Region(1, 2), (3, 4)], 10) == [Region(1, 2), Region(3, 4)]

    def test_empty_regions_are_kept(self) -> None:
        assert resolve_regions([(0, 0)], 0) == [Region(0, 0)]

    def test_merge_sorts_and_merges_overlaps(self) -> None:
        selection = [(6, 11), (0, 5), (3, 7)]
        assert resolve_regions(selection, 11) == [Region(0, 11)]

    def test_merge_keeps_touching_regions_apart(self) -> None:
        assert resolve_regions([(3, 6), (0, 3)], 6) == [Region(0, 3), Region(3, 6)]

    def test_merge_absorbs_contained_regions(self) -> None:
        assert merge_regions([Region(0, 10), Region(2, 4), Region(4, 4)]) == [Region(0, 10)]

    def test_merge_keeps_malformed_regions(self) -> None:
        result = resolve_regions([(0, 5), (3, 1)], 10)
        assert result == [Region(0, 5), Region(3, 1)]

    @pytest.mark.parametrize("item", [(0, 2.7), ("0", "3"), 5, (1, 2, 3)])
    def test_malformed_items_raise_invalid_region(self, item) -> None:
        with pytest.raises(InvalidRegionError) as exc_info:
            resolve_regions([(0, 1), item], 10)
        assert exc_info.value.region == item
        assert exc_info.value.length == 10

    def test_out_of_bounds_regions_are_not_validated_here(self) -> None:
        assert resolve_regions([(0, 50)], 10) == [Region(0, 50)]

    def test_as_given_keeps_order_and_overlap(self) -> None:
        selection = [(6, 11), (0, 5), (3, 7)]
        result = resolve_regions(selection, 11, OverlapStrategy.AS_GIVEN)
        assert result == [Region(6, 11), Region(0, 5), Region(3, 7)]


class TestOverlapStrategyConfig:
    """Grouped tests for reading the strategy from configuration."""

    def test_default_is_merge(self) -> None:
        assert get_overlap_strategy(None) is OverlapStrategy.MERGE
        assert get_overlap_strategy({}) is OverlapStrategy.MERGE

    def test_as_given(self) -> None:
        config = {"regions": {"overlap_strategy": "AS_GIVEN"}}
        assert get_overlap_strategy(config) is OverlapStrategy.AS_GIVEN

    def test_unknown_value_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        config = {"regions": {"overlap_strategy": "sideways"}}
        with caplog.at_level(logging.WARNING):
            assert get_overlap_strategy(config) is OverlapStrategy.MERGE
        assert "sideways" in caplog.text
