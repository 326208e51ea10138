"""Unit tests for the ride status state machine."""

import pytest

from ridemarket.domain.enums import RIDE_TRANSITIONS, RideStatus, transition
from ridemarket.domain.errors import InvalidTransition, StateError


class TestRideStateMachine:
    # ── Valid transitions ─────────────────────────────────────────

    def test_requested_to_accepted(self):
        assert transition(RideStatus.REQUESTED, RideStatus.ACCEPTED) == RideStatus.ACCEPTED

    def test_requested_to_cancelled(self):
        assert transition(RideStatus.REQUESTED, RideStatus.CANCELLED) == RideStatus.CANCELLED

    def test_accepted_to_in_progress(self):
        assert (
            transition(RideStatus.ACCEPTED, RideStatus.IN_PROGRESS)
            == RideStatus.IN_PROGRESS
        )

    def test_accepted_to_cancelled(self):
        assert transition(RideStatus.ACCEPTED, RideStatus.CANCELLED) == RideStatus.CANCELLED

    def test_in_progress_to_completed(self):
        assert (
            transition(RideStatus.IN_PROGRESS, RideStatus.COMPLETED)
            == RideStatus.COMPLETED
        )

    # ── Invalid transitions ───────────────────────────────────────

    def test_requested_to_in_progress_fails(self):
        """No transition skips a state."""
        with pytest.raises(InvalidTransition):
            transition(RideStatus.REQUESTED, RideStatus.IN_PROGRESS)

    def test_requested_to_completed_fails(self):
        with pytest.raises(InvalidTransition):
            transition(RideStatus.REQUESTED, RideStatus.COMPLETED)

    def test_in_progress_to_cancelled_fails(self):
        """Once in progress, can only complete -- not cancel."""
        with pytest.raises(InvalidTransition):
            transition(RideStatus.IN_PROGRESS, RideStatus.CANCELLED)

    @pytest.mark.parametrize("terminal", [RideStatus.COMPLETED, RideStatus.CANCELLED])
    def test_terminal_states_have_no_exit(self, terminal):
        assert RIDE_TRANSITIONS[terminal] == set()
        for target in RideStatus:
            with pytest.raises(InvalidTransition):
                transition(terminal, target)

    def test_invalid_transition_is_a_state_error(self):
        with pytest.raises(StateError) as exc_info:
            transition(RideStatus.COMPLETED, RideStatus.CANCELLED)
        assert exc_info.value.details == {"from": "COMPLETED", "to": "CANCELLED"}
