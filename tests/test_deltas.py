"""Tests for the answer transition arithmetic and percentage shares."""

import pytest

from swipe_api.crud import compute_deltas
from swipe_api.crud.answers import compute_percentages


class TestComputeDeltas:
    """previous -> new transitions and the counter movement they cause."""

    @pytest.mark.parametrize(
        "previous,new,expected",
        [
            (None, "yes", (1, 0)),
            (None, "no", (0, 1)),
            ("yes", "no", (-1, 1)),
            ("no", "yes", (1, -1)),
            ("yes", "yes", (0, 0)),
            ("no", "no", (0, 0)),
            ("yes", None, (-1, 0)),
            ("no", None, (0, -1)),
            (None, None, (0, 0)),
        ],
    )
    def test_transition(self, previous, new, expected):
        assert compute_deltas(previous, new) == expected

    def test_switch_never_moves_both_counters_up(self):
        yes_delta, no_delta = compute_deltas("yes", "no")
        assert yes_delta + no_delta == 0

    @pytest.mark.parametrize("bad", ["maybe", "YES", "", "1"])
    def test_unknown_value_rejected(self, bad):
        with pytest.raises(ValueError):
            compute_deltas(None, bad)
        with pytest.raises(ValueError):
            compute_deltas(bad, "yes")


class TestComputePercentages:
    def test_shares_add_up_to_100(self):
        result = compute_percentages({"q1": {"yes": 1, "no": 2}, "q2": {"yes": 3, "no": 0}})
        assert result["q1"] == {"yes": 33, "no": 67}
        assert result["q2"] == {"yes": 100, "no": 0}

    def test_empty_scenario_is_zero_zero(self):
        assert compute_percentages({"q1": {"yes": 0, "no": 0}}) == {"q1": {"yes": 0, "no": 0}}
