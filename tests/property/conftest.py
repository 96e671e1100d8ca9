# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Usage:
    from tests.property.conftest import lanes, lane_layouts

    @given(layout=lane_layouts())
    def test_something(layout: dict[Lane, int]) -> None:
        ...
"""

from __future__ import annotations

from hypothesis import strategies as st

from shiptivity.contracts.enums import LANE_TAGS, Lane

# Any of the three lanes
lanes = st.sampled_from(list(Lane))

# Requested priorities, including values well past the end of any lane
priorities = st.integers(min_value=1, max_value=25)

# Strings that must never be accepted as lane tags
bad_lane_tags = st.text(max_size=20).filter(lambda s: s not in LANE_TAGS)


@st.composite
def lane_layouts(draw: st.DrawFn, max_per_lane: int = 8) -> dict[Lane, int]:
    """Number of clients per lane; at least one client on the board."""
    sizes = {lane: draw(st.integers(min_value=0, max_value=max_per_lane)) for lane in Lane}
    if sum(sizes.values()) == 0:
        sizes[draw(lanes)] = 1
    return sizes
