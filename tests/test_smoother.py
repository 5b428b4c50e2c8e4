# tests/test_smoother.py
"""
Test control signal smoothing.

Convergence is geometric, so it is asserted with a tolerance bound,
never with equality.
"""

import math

import pytest

from gesture_graph.control.smoother import (
    ALPHA,
    ControlSample,
    ControlSmoother,
    ControlState,
    coerce_number,
)


def in_unit_square(state: ControlState) -> bool:
    return 0.0 <= state.expansion <= 1.0 and 0.0 <= state.tension <= 1.0


class TestConvergence:
    """Tests for EMA convergence."""

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 10, 20])
    def test_geometric_convergence_to_constant_sample(self, n):
        """From (0, 0), n samples of (1, 1) land within (1 - alpha)^n of (1, 1)."""
        smoother = ControlSmoother(initial=ControlState(0.0, 0.0))
        for _ in range(n):
            state = smoother.update({"expansion": 1.0, "tension": 1.0})
            assert in_unit_square(state)

        bound = (1 - ALPHA) ** n + 1e-12
        assert abs(state.expansion - 1.0) <= bound
        assert abs(state.tension - 1.0) <= bound

    def test_single_step_is_halfway(self, smoother):
        state = smoother.update({"expansion": 0.8, "tension": 0.4})
        assert state.expansion == pytest.approx(0.4)
        assert state.tension == pytest.approx(0.2)

    def test_fields_smoothed_independently(self):
        smoother = ControlSmoother(initial=ControlState(1.0, 0.0))
        state = smoother.update({"expansion": 0.0, "tension": 1.0})
        assert state.expansion == pytest.approx(0.5)
        assert state.tension == pytest.approx(0.5)

    def test_alpha_matches_default(self):
        assert ALPHA == 0.5
        assert ControlSmoother().alpha == 0.5


class TestSampleDefense:
    """Bad samples are defaulted and clamped, never raised."""

    def test_out_of_range_samples_are_clamped(self, smoother):
        state = smoother.update({"expansion": 5.0, "tension": -3.0})
        assert state.expansion == pytest.approx(0.5)
        assert state.tension == 0.0

        for _ in range(50):
            state = smoother.update({"expansion": 1e9, "tension": -1e9})
            assert in_unit_square(state)

    def test_missing_fields_default_to_zero(self):
        smoother = ControlSmoother(initial=ControlState(1.0, 1.0))
        state = smoother.update({})
        assert state.expansion == pytest.approx(0.5)
        assert state.tension == pytest.approx(0.5)

    @pytest.mark.parametrize("sample", [
        None,
        {"expansion": "wide", "tension": [1]},
        {"expansion": float("nan"), "tension": float("inf")},
        {"expansion": True, "tension": None},
        "not a mapping",
    ])
    def test_invalid_samples_count_as_zero(self, sample):
        smoother = ControlSmoother(initial=ControlState(0.6, 0.6))
        state = smoother.update(sample)
        assert state.expansion == pytest.approx(0.3)
        assert state.tension == pytest.approx(0.3)

    def test_numeric_strings_accepted(self, smoother):
        state = smoother.update({"expansion": "1", "tension": "0.5"})
        assert state.expansion == pytest.approx(0.5)
        assert state.tension == pytest.approx(0.25)

    def test_coerce_number(self):
        assert coerce_number(0.25) == 0.25
        assert coerce_number(3) == 3.0
        assert coerce_number(None) == 0.0
        assert coerce_number(False) == 0.0
        assert coerce_number(float("-inf")) == 0.0
        assert coerce_number(object()) == 0.0

    def test_sample_from_payload(self):
        assert ControlSample.from_payload({"expansion": 0.7}) == ControlSample(0.7, 0.0)
        assert ControlSample.from_payload(None) == ControlSample()


class TestStateValue:
    """ControlState is an immutable value swapped on each update."""

    def test_update_replaces_state(self, smoother):
        before = smoother.state
        after = smoother.update({"expansion": 1.0, "tension": 1.0})
        assert smoother.state is after
        assert before is not after
        assert before == ControlState(0.0, 0.0)

    def test_state_is_frozen(self):
        state = ControlState(0.2, 0.3)
        with pytest.raises(Exception):
            state.expansion = 0.9

    def test_state_clamps_on_construction(self):
        state = ControlState(expansion=2.0, tension=-1.0)
        assert state == ControlState(1.0, 0.0)
        assert not math.isnan(ControlState(float("nan"), 0.0).expansion)

    def test_reset(self):
        smoother = ControlSmoother(initial=ControlState(0.1, 0.0))
        smoother.update({"expansion": 1.0, "tension": 1.0})
        assert smoother.reset() == ControlState(0.1, 0.0)
        assert smoother.reset(ControlState(0.5, 0.5)) == ControlState(0.5, 0.5)

    def test_invalid_alpha(self):
        with pytest.raises(ValueError):
            ControlSmoother(alpha=0.0)
        with pytest.raises(ValueError):
            ControlSmoother(alpha=1.5)
