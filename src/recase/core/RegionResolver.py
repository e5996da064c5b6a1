# recase/core/RegionResolver.py
"""RegionResolver Module
======================
Decides which spans of a buffer a case command acts on.

A `Region` is a half-open interval ``[start, end)`` of codepoint offsets. The
host supplies the user's selection as an ordered sequence of regions; when it
is empty the whole buffer becomes the single target region.

Hosts are trusted to supply ascending, disjoint regions but nothing here
crashes when they do not. What happens to overlapping or unsorted selections is
chosen by `OverlapStrategy`:

- ``MERGE`` (default): well-formed regions are sorted and strictly overlapping
  ones are merged into their union, so no codepoint is transformed twice.
- ``AS_GIVEN``: regions are returned untouched, in host order.

Bounds are not validated here; the executor checks every region against the
live buffer length and rejects malformed ones.
"""

import enum
import logging
import operator
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Union

from recase.core.Errors import InvalidRegionError


## ==================== Region ====================
@dataclass(frozen=True)
class Region:
    """Half-open interval ``[start, end)`` of codepoint offsets into a buffer."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not isinstance(self.start, int) or not isinstance(self.end, int):
            raise TypeError(
                f"Region bounds must be integers, got ({self.start!r}, {self.end!r})"
            )

    @classmethod
    def coerce(cls, value: Union["Region", Sequence[int]]) -> "Region":
        """Builds a `Region` from a `Region`, a host object with ``start`` and
        ``end`` attributes, or any ``(start, end)`` pair.

        Bounds must be integers (anything `operator.index` accepts). Floats and
        numeric strings are rejected rather than truncated.

        Raises:
            TypeError: If a bound is not an integer.
        """
        if isinstance(value, Region):
            return value
        if hasattr(value, "start") and hasattr(value, "end"):
            start, end = value.start, value.end
        else:
            start, end = value
        return cls(operator.index(start), operator.index(end))

    @property
    def size(self) -> int:
        return self.end - self.start

    @property
    def empty(self) -> bool:
        return self.start == self.end

    @property
    def well_formed(self) -> bool:
        """True if ``0 <= start <= end``, regardless of any buffer."""
        return 0 <= self.start <= self.end

    def is_valid_for(self, length: int) -> bool:
        """True if ``0 <= start <= end <= length``."""
        return self.well_formed and self.end <= length

    def overlaps(self, other: "Region") -> bool:
        """True if both regions share at least one codepoint."""
        return self.start < other.end and other.start < self.end

    def union(self, other: "Region") -> "Region":
        return Region(min(self.start, other.start), max(self.end, other.end))


class OverlapStrategy(enum.Enum):
    MERGE = "merge"
    AS_GIVEN = "as_given"


def get_overlap_strategy(config: Optional[dict[str, Any]]) -> OverlapStrategy:
    """Reads ``regions.overlap_strategy`` from the configuration.

    Unknown values fall back to `OverlapStrategy.MERGE` with a warning.
    """
    raw = ((config or {}).get("regions") or {}).get("overlap_strategy", "merge")
    try:
        return OverlapStrategy(str(raw).lower())
    except ValueError:
        logging.warning(
            f"RegionResolver: unknown overlap_strategy {raw!r}, falling back to 'merge'."
        )
        return OverlapStrategy.MERGE


def _selection_regions(selection: Any, length: int) -> list[Region]:
    """Extracts regions from a selection object, a plain sequence, or None.

    Raises:
        InvalidRegionError: If an item is not a pair of integer bounds.
    """
    if selection is None:
        return []
    raw: Iterable[Any]
    if hasattr(selection, "regions"):
        raw = selection.regions()
    else:
        raw = selection
    regions = []
    for item in raw:
        try:
            regions.append(Region.coerce(item))
        except (TypeError, ValueError) as e:
            raise InvalidRegionError(item, length) from e
    return regions


def merge_regions(regions: Sequence[Region]) -> list[Region]:
    """Sorts regions by start and merges the ones that strictly overlap.

    Regions that merely touch (``a.end == b.start``) stay separate, since each
    region is scanned on its own by title case. Malformed regions are never
    merged; they keep their sorted position so the executor can reject them.
    """
    merged: list[Region] = []
    for region in sorted(regions, key=lambda r: (r.start, r.end)):
        if (
            merged
            and region.well_formed
            and merged[-1].well_formed
            and region.start < merged[-1].end
        ):
            merged[-1] = merged[-1].union(region)
        else:
            merged.append(region)
    return merged


def resolve_regions(
    selection: Any,
    length: int,
    strategy: OverlapStrategy = OverlapStrategy.MERGE,
) -> list[Region]:
    """Produces the ordered list of regions a command must act on.

    Args:
        selection: An object with a ``regions()`` method, a sequence of
            `Region` or ``(start, end)`` pairs, or None.
        length: The buffer length in codepoints.
        strategy: How to treat overlapping or unsorted regions.

    Returns:
        ``[Region(0, length)]`` for an empty selection, otherwise the selected
        regions as dictated by `strategy`. Empty regions are kept; they are
        valid targets that transform nothing.

    Raises:
        InvalidRegionError: If a selected region does not have integer bounds.
    """
    regions = _selection_regions(selection, length)
    if not regions:
        logging.debug(f"RegionResolver: empty selection, targeting whole buffer [0, {length}).")
        return [Region(0, length)]

    if strategy is OverlapStrategy.AS_GIVEN:
        return regions

    merged = merge_regions(regions)
    if len(merged) != len(regions):
        logging.debug(
            f"RegionResolver: merged {len(regions)} selected regions into {len(merged)}."
        )
    return merged
