"""
Onboarding State Management.

Single source of truth for which workshop step is active and whether the
visitor may move forward. Every operation is total over the bounded index
range: illegal forward motion is reported, never raised.

Successful forward transitions are announced as StepAdvanced events. The
machine never waits on (or hears back from) whoever consumes them.
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, NamedTuple, Sequence

from .steps import WORKSHOP_STEPS, Step, validate_steps

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Direction of the most recent transition."""
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True)
class StepAdvanced:
    """Emitted after a successful forward transition."""
    step: int
    name: str | None


StepListener = Callable[[StepAdvanced], None]


class AdvanceResult(NamedTuple):
    new_index: int
    transitioned: bool


@dataclass
class WizardState:
    """
    Mutable navigation state, owned by WizardStateMachine.

    visitor_name only has to be non-empty while current_index == 0.
    """
    current_index: int = 0
    last_direction: Direction = Direction.FORWARD
    visitor_name: str = ""

    def to_dict(self) -> dict:
        data = asdict(self)
        data["last_direction"] = self.last_direction.value
        return data

    @classmethod
    def from_dict(cls, data: dict, last_index: int = len(WORKSHOP_STEPS) - 1) -> "WizardState":
        """Deserialize state, clamping current_index into [0, last_index]."""
        data = dict(data)
        if "last_direction" in data:
            data["last_direction"] = Direction(data["last_direction"])
        if "current_index" in data:
            data["current_index"] = min(max(int(data["current_index"]), 0), last_index)
        return cls(**data)


@dataclass(frozen=True)
class WizardSnapshot:
    """Read-only view handed to the presentation layer."""
    current_index: int
    last_direction: Direction
    visitor_name: str
    progress_percent: float
    total_steps: int
    is_complete: bool
    step_label: str | None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["last_direction"] = self.last_direction.value
        return data


class WizardStateMachine:
    """
    Linear step navigation with a name gate on the entry step.

    Usage:
        machine = WizardStateMachine(on_step_advanced=dispatcher)
        machine.set_visitor_name("Ada")
        new_index, transitioned = machine.advance()
    """

    def __init__(
        self,
        steps: Sequence[Step] = WORKSHOP_STEPS,
        on_step_advanced: StepListener | None = None,
    ):
        self._steps = tuple(steps)
        validate_steps(self._steps)
        self._state = WizardState()
        self._listener = on_step_advanced

    @classmethod
    def from_state(
        cls,
        state: WizardState,
        steps: Sequence[Step] = WORKSHOP_STEPS,
        on_step_advanced: StepListener | None = None,
    ) -> "WizardStateMachine":
        """Resume from a previously serialized state, clamping the index into range."""
        machine = cls(steps, on_step_advanced)
        machine._state = WizardState(
            current_index=min(max(state.current_index, 0), machine.last_index),
            last_direction=state.last_direction,
            visitor_name=state.visitor_name,
        )
        return machine

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def total_steps(self) -> int:
        return len(self._steps)

    @property
    def last_index(self) -> int:
        return len(self._steps) - 1

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def current_step(self) -> Step:
        return self._steps[self._state.current_index]

    @property
    def visitor_name(self) -> str:
        return self._state.visitor_name

    @property
    def is_complete(self) -> bool:
        return self._state.current_index == self.last_index

    @property
    def progress_percent(self) -> float:
        # Derived on every read so it can never drift from current_index
        return self._state.current_index / self.last_index * 100

    def step_label(self) -> str | None:
        """'Step X / N' for instructional steps; None on entry and terminal steps."""
        index = self._state.current_index
        if 0 < index < self.last_index:
            return f"Step {index + 1} / {self.total_steps}"
        return None

    def get_state(self) -> WizardSnapshot:
        return WizardSnapshot(
            current_index=self._state.current_index,
            last_direction=self._state.last_direction,
            visitor_name=self._state.visitor_name,
            progress_percent=self.progress_percent,
            total_steps=self.total_steps,
            is_complete=self.is_complete,
            step_label=self.step_label(),
        )

    def to_state(self) -> WizardState:
        """Copy of the internal state, safe to serialize."""
        return WizardState(**vars(self._state))

    def can_advance(self) -> bool:
        index = self._state.current_index
        if index >= self.last_index:
            return False
        if index == 0:
            return bool(self._state.visitor_name.strip())
        return True

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def advance(self) -> AdvanceResult:
        """Move forward one step if allowed; emits StepAdvanced on success."""
        if not self.can_advance():
            return AdvanceResult(self._state.current_index, False)

        self._state.current_index += 1
        self._state.last_direction = Direction.FORWARD
        new_index = self._state.current_index

        self._emit(StepAdvanced(step=new_index, name=self._state.visitor_name or None))
        return AdvanceResult(new_index, True)

    def retreat(self) -> int:
        self._state.current_index = max(0, self._state.current_index - 1)
        self._state.last_direction = Direction.BACKWARD
        return self._state.current_index

    def restart(self) -> int:
        """Back to the entry step. The visitor name is kept."""
        self._state.current_index = 0
        self._state.last_direction = Direction.BACKWARD
        return self._state.current_index

    def set_visitor_name(self, name: str) -> None:
        self._state.visitor_name = name

    def _emit(self, event: StepAdvanced) -> None:
        if self._listener is None:
            return
        try:
            self._listener(event)
        except Exception:
            # Navigation has already happened; a broken listener must not undo it
            logger.exception(f"Step listener failed for step {event.step}")
