"""
Studio Onboarding - guided first-run setup for the Vibe Coding V-Team.

Walks a new designer through a fixed, numbered workshop and records how far
they got in Supabase.

Pieces:
- WizardStateMachine: which step is active and whether moving forward is legal
- ProgressRecorder: best-effort upsert of (designer_name, current_step)
- ProgressDispatcher: fire-and-forget bridge from step events to the recorder
"""

__version__ = "1.0.0"

from .state import (
    AdvanceResult,
    Direction,
    StepAdvanced,
    WizardSnapshot,
    WizardState,
    WizardStateMachine,
)
from .recorder import ProgressRecorder, RecordResult, RecordStatus
from .dispatch import ProgressDispatcher

__all__ = [
    "AdvanceResult",
    "Direction",
    "StepAdvanced",
    "WizardSnapshot",
    "WizardState",
    "WizardStateMachine",
    "ProgressRecorder",
    "RecordResult",
    "RecordStatus",
    "ProgressDispatcher",
]
