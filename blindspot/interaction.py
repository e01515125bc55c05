"""Hover / pin / detail state for the matrix view.

Each event returns a new MatrixState; states are never mutated. The only
item a state refers to is its ``item_id``.
"""

from dataclasses import dataclass
from enum import Enum


class Phase(str, Enum):
    IDLE = "idle"
    HOVERING = "hovering"
    LOCKED = "locked"
    DETAIL_OPEN = "detail_open"


@dataclass(frozen=True)
class MatrixState:
    phase: Phase = Phase.IDLE
    item_id: str | None = None

    @property
    def tooltip_id(self) -> str | None:
        """Item whose tooltip is visible, if any."""
        if self.phase in (Phase.HOVERING, Phase.LOCKED):
            return self.item_id
        return None

    @property
    def detail_id(self) -> str | None:
        return self.item_id if self.phase == Phase.DETAIL_OPEN else None


IDLE = MatrixState()


def pointer_enter(state: MatrixState, item_id: str) -> MatrixState:
    # A pinned tooltip or an open panel keeps focus until cleared.
    if state.phase in (Phase.LOCKED, Phase.DETAIL_OPEN):
        return state
    return MatrixState(Phase.HOVERING, item_id)


def pointer_leave(state: MatrixState) -> MatrixState:
    if state.phase == Phase.HOVERING:
        return IDLE
    return state


def pin(state: MatrixState) -> MatrixState:
    if state.phase == Phase.HOVERING:
        return MatrixState(Phase.LOCKED, state.item_id)
    return state


def outside_click(state: MatrixState) -> MatrixState:
    if state.phase == Phase.LOCKED:
        return IDLE
    return state


def click(state: MatrixState, item_id: str) -> MatrixState:
    return MatrixState(Phase.DETAIL_OPEN, item_id)


def dismiss(state: MatrixState) -> MatrixState:
    if state.phase == Phase.DETAIL_OPEN:
        return IDLE
    return state


def escape(state: MatrixState) -> MatrixState:
    return IDLE
