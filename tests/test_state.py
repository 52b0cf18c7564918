"""
Tests for WizardStateMachine navigation.
"""

import random

import pytest

from studio_onboarding.state import (
    Direction,
    StepAdvanced,
    WizardState,
    WizardStateMachine,
)
from studio_onboarding.steps import WORKSHOP_STEPS, Step


def make_steps(n: int) -> list[Step]:
    return [
        Step(
            index=i,
            title=f"Step {i}",
            analogy="",
            description="",
            instruction="",
            button_text="Next",
            requires_input=(i == 0),
        )
        for i in range(n)
    ]


def named_machine(name: str = "Ada", **kwargs) -> WizardStateMachine:
    machine = WizardStateMachine(**kwargs)
    machine.set_visitor_name(name)
    return machine


class TestConstruction:

    def test_default_catalogue(self):
        machine = WizardStateMachine()
        assert machine.total_steps == 7
        assert machine.current_index == 0
        assert machine.current_step.requires_input is True

    def test_rejects_single_step(self):
        with pytest.raises(ValueError):
            WizardStateMachine(steps=make_steps(1))

    def test_rejects_gapped_indices(self):
        steps = make_steps(3)
        steps[2] = Step(index=5, title="", analogy="", description="", instruction="", button_text="")
        with pytest.raises(ValueError):
            WizardStateMachine(steps=steps)


class TestCanAdvance:

    def test_blank_name_blocks_entry_step(self):
        machine = WizardStateMachine()
        assert machine.can_advance() is False

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_whitespace_name_blocks_entry_step(self, name):
        machine = named_machine(name)
        assert machine.can_advance() is False

    def test_name_unlocks_entry_step(self):
        assert named_machine("Ada").can_advance() is True

    def test_name_not_required_after_entry(self):
        machine = named_machine("Ada")
        machine.advance()
        machine.set_visitor_name("")
        assert machine.can_advance() is True

    def test_terminal_step_cannot_advance(self):
        machine = named_machine()
        for _ in range(6):
            machine.advance()
        assert machine.is_complete
        assert machine.can_advance() is False


class TestAdvance:

    def test_blank_name_does_not_move(self):
        machine = named_machine("  ")
        new_index, transitioned = machine.advance()
        assert (new_index, transitioned) == (0, False)
        assert machine.current_index == 0

    def test_refused_advance_keeps_direction(self):
        machine = WizardStateMachine()
        machine.restart()
        machine.advance()
        assert machine.get_state().last_direction == Direction.BACKWARD

    def test_advance_increments_by_one(self):
        machine = named_machine()
        result = machine.advance()
        assert result.new_index == 1
        assert result.transitioned is True
        assert machine.get_state().last_direction == Direction.FORWARD

    def test_advance_at_terminal_is_noop(self):
        machine = named_machine()
        for _ in range(10):
            machine.advance()
        assert machine.current_index == 6
        assert machine.advance() == (6, False)


class TestRetreat:

    def test_retreat_decrements(self):
        machine = named_machine()
        machine.advance()
        machine.advance()
        assert machine.retreat() == 1
        assert machine.get_state().last_direction == Direction.BACKWARD

    def test_retreat_floors_at_zero(self):
        machine = WizardStateMachine()
        assert machine.retreat() == 0
        assert machine.retreat() == 0
        assert machine.get_state().last_direction == Direction.BACKWARD


class TestRestart:

    def test_restart_from_terminal(self):
        machine = named_machine("Ada")
        for _ in range(6):
            machine.advance()
        assert machine.restart() == 0
        state = machine.get_state()
        assert state.current_index == 0
        assert state.last_direction == Direction.BACKWARD

    def test_restart_preserves_name(self):
        machine = named_machine("Ada")
        machine.advance()
        machine.restart()
        assert machine.visitor_name == "Ada"
        assert machine.can_advance() is True

    def test_restart_at_entry(self):
        machine = WizardStateMachine()
        assert machine.restart() == 0


class TestSnapshot:

    def test_progress_percent_endpoints(self):
        machine = named_machine()
        assert machine.get_state().progress_percent == 0
        for _ in range(6):
            machine.advance()
        assert machine.get_state().progress_percent == 100

    def test_progress_percent_follows_index(self):
        machine = WizardStateMachine(steps=make_steps(5))
        machine.set_visitor_name("Ada")
        machine.advance()
        assert machine.get_state().progress_percent == 25
        machine.retreat()
        assert machine.get_state().progress_percent == 0

    def test_step_label_only_on_instructional_steps(self):
        machine = named_machine()
        assert machine.get_state().step_label is None
        machine.advance()
        assert machine.get_state().step_label == "Step 2 / 7"
        for _ in range(5):
            machine.advance()
        assert machine.get_state().step_label is None

    def test_to_dict(self):
        data = named_machine("Ada").get_state().to_dict()
        assert data["current_index"] == 0
        assert data["last_direction"] == "forward"
        assert data["visitor_name"] == "Ada"
        assert data["total_steps"] == 7
        assert data["is_complete"] is False


class TestBoundaries:

    @pytest.mark.parametrize("n", [2, 3, 7, 12])
    def test_index_stays_in_bounds(self, n):
        rng = random.Random(n)
        machine = WizardStateMachine(steps=make_steps(n))
        machine.set_visitor_name("Ada")
        for _ in range(500):
            op = rng.choice(["advance", "advance", "retreat", "restart"])
            getattr(machine, op)()
            assert 0 <= machine.current_index <= n - 1
            assert 0 <= machine.get_state().progress_percent <= 100

    def test_two_step_wizard(self):
        machine = WizardStateMachine(steps=make_steps(2))
        machine.set_visitor_name("Ada")
        assert machine.advance() == (1, True)
        assert machine.is_complete
        assert machine.get_state().progress_percent == 100


class TestStepEvents:

    def test_ada_walk_emits_each_new_index(self):
        events: list[StepAdvanced] = []
        machine = named_machine("Ada", on_step_advanced=events.append)

        indices = [machine.current_index]
        for _ in range(6):
            machine.advance()
            indices.append(machine.current_index)

        assert indices == [0, 1, 2, 3, 4, 5, 6]
        assert [e.step for e in events] == [1, 2, 3, 4, 5, 6]
        assert all(e.name == "Ada" for e in events)
        assert machine.get_state().progress_percent == 100

    def test_refused_advance_emits_nothing(self):
        events: list[StepAdvanced] = []
        machine = WizardStateMachine(on_step_advanced=events.append)
        machine.advance()
        assert events == []

    def test_retreat_and_restart_emit_nothing(self):
        events: list[StepAdvanced] = []
        machine = named_machine(on_step_advanced=events.append)
        machine.advance()
        machine.retreat()
        machine.restart()
        assert len(events) == 1

    def test_blank_name_after_entry_emits_none(self):
        events: list[StepAdvanced] = []
        machine = named_machine(on_step_advanced=events.append)
        machine.advance()
        machine.set_visitor_name("")
        machine.advance()
        assert events[-1] == StepAdvanced(step=2, name=None)

    def test_failing_listener_does_not_block_navigation(self):
        def explode(event):
            raise RuntimeError("listener down")

        machine = named_machine(on_step_advanced=explode)
        assert machine.advance() == (1, True)
        assert machine.current_index == 1


class TestSerialization:

    def test_round_trip(self):
        state = WizardState(current_index=3, last_direction=Direction.BACKWARD, visitor_name="Ada")
        restored = WizardState.from_dict(state.to_dict())
        assert restored == state

    def test_from_dict_clamps_index(self):
        high = WizardState.from_dict({"current_index": 42, "last_direction": "forward", "visitor_name": "Ada"})
        assert high.current_index == 6
        low = WizardState.from_dict({"current_index": -3})
        assert low.current_index == 0

    def test_from_dict_clamps_to_custom_length(self):
        state = WizardState.from_dict({"current_index": 9}, last_index=2)
        assert state.current_index == 2
        assert WizardStateMachine.from_state(state, steps=make_steps(3)).current_index == 2

    def test_from_state_clamps_index(self):
        machine = WizardStateMachine.from_state(WizardState(current_index=42, visitor_name="Ada"))
        assert machine.current_index == 6
        machine = WizardStateMachine.from_state(WizardState(current_index=-3))
        assert machine.current_index == 0

    def test_to_state_is_a_copy(self):
        machine = named_machine()
        snapshot = machine.to_state()
        snapshot.current_index = 5
        assert machine.current_index == 0

    def test_catalogue_matches_machine(self):
        assert WizardStateMachine().steps == WORKSHOP_STEPS
