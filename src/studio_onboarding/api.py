"""
Onboarding API Endpoints.

Thin HTTP presentation layer over WizardStateMachine. Each session is an
opaque id mapped to a machine held in process memory; forward transitions
are recorded in the background through the shared ProgressDispatcher.
"""

import logging
import time
import uuid

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from .config import get_settings
from .dispatch import ProgressDispatcher
from .recorder import ProgressRecorder
from .state import WizardStateMachine
from .steps import WORKSHOP_STEPS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])

# In-memory wizard sessions (keyed by session id)
# Note: sessions do not survive a restart; only progress rows are durable
sessions: dict[str, WizardStateMachine] = {}
# Monotonic time each session was last touched
last_seen: dict[str, float] = {}

_dispatcher: ProgressDispatcher | None = None


def get_dispatcher() -> ProgressDispatcher:
    """Shared dispatcher, created on first use."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = ProgressDispatcher(ProgressRecorder())
    return _dispatcher


def prune_expired_sessions() -> int:
    """Drop sessions idle longer than session_expire_hours. Returns how many went."""
    cutoff = time.monotonic() - get_settings().session_expire_hours * 3600
    expired = [sid for sid, seen in last_seen.items() if seen < cutoff]
    for sid in expired:
        sessions.pop(sid, None)
        last_seen.pop(sid, None)
    if expired:
        logger.info(f"Expired {len(expired)} idle onboarding session(s)")
    return len(expired)


def get_session(session_id: str) -> WizardStateMachine:
    prune_expired_sessions()
    machine = sessions.get(session_id)
    if machine is None:
        raise HTTPException(status_code=404, detail=f"Unknown onboarding session: {session_id}")
    last_seen[session_id] = time.monotonic()
    return machine


# =============================================================================
# Request/Response Models
# =============================================================================


class StepResponse(BaseModel):
    index: int
    title: str
    analogy: str
    description: str
    instruction: str
    button_text: str
    requires_input: bool
    command_text: str | None = None
    link: str | None = None
    alt_text: str | None = None


class NameRequest(BaseModel):
    name: str = Field(default="", max_length=200)


class StateResponse(BaseModel):
    """Current wizard state for one session."""
    session_id: str
    current_index: int
    last_direction: str
    visitor_name: str
    progress_percent: float
    total_steps: int
    is_complete: bool
    step_label: str | None = None
    can_advance: bool


class AdvanceResponse(StateResponse):
    transitioned: bool


def _state_payload(session_id: str, machine: WizardStateMachine) -> dict:
    return {
        "session_id": session_id,
        **machine.get_state().to_dict(),
        "can_advance": machine.can_advance(),
    }


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/steps", response_model=list[StepResponse])
async def list_steps():
    """Workshop step catalogue."""
    return [StepResponse(**step.to_dict()) for step in WORKSHOP_STEPS]


@router.post("/sessions", response_model=StateResponse, status_code=201)
async def create_session(dispatcher: ProgressDispatcher = Depends(get_dispatcher)):
    prune_expired_sessions()
    session_id = str(uuid.uuid4())
    sessions[session_id] = WizardStateMachine(on_step_advanced=dispatcher)
    last_seen[session_id] = time.monotonic()
    logger.info(f"Created onboarding session {session_id}")
    return StateResponse(**_state_payload(session_id, sessions[session_id]))


@router.get("/sessions/{session_id}", response_model=StateResponse)
async def get_state(session_id: str):
    return StateResponse(**_state_payload(session_id, get_session(session_id)))


@router.put("/sessions/{session_id}/name", response_model=StateResponse)
async def set_name(session_id: str, request: NameRequest):
    machine = get_session(session_id)
    machine.set_visitor_name(request.name)
    return StateResponse(**_state_payload(session_id, machine))


@router.post("/sessions/{session_id}/advance", response_model=AdvanceResponse)
async def advance(session_id: str):
    """
    Move forward one step.

    A refused transition (blank name, already finished) is not an error:
    the response just carries transitioned=false.
    """
    machine = get_session(session_id)
    _, transitioned = machine.advance()
    return AdvanceResponse(**_state_payload(session_id, machine), transitioned=transitioned)


@router.post("/sessions/{session_id}/retreat", response_model=StateResponse)
async def retreat(session_id: str):
    machine = get_session(session_id)
    machine.retreat()
    return StateResponse(**_state_payload(session_id, machine))


@router.post("/sessions/{session_id}/restart", response_model=StateResponse)
async def restart(session_id: str):
    machine = get_session(session_id)
    machine.restart()
    return StateResponse(**_state_payload(session_id, machine))
