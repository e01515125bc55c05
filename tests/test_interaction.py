"""Matrix hover / pin / detail transitions."""

from __future__ import annotations

from blindspot.interaction import (
    IDLE,
    MatrixState,
    Phase,
    click,
    dismiss,
    escape,
    outside_click,
    pin,
    pointer_enter,
    pointer_leave,
)


def test_hover_and_leave() -> None:
    s = pointer_enter(IDLE, "a1")
    assert s == MatrixState(Phase.HOVERING, "a1")
    assert s.tooltip_id == "a1"
    assert pointer_leave(s) == IDLE


def test_hover_moves_between_items() -> None:
    s = pointer_enter(pointer_enter(IDLE, "a1"), "a2")
    assert s.item_id == "a2"


def test_locked_survives_leave_and_other_hover() -> None:
    s = pin(pointer_enter(IDLE, "a1"))
    assert s.phase is Phase.LOCKED
    assert pointer_leave(s) == s
    assert pointer_enter(s, "a2") == s
    assert s.tooltip_id == "a1"


def test_outside_click_unlocks() -> None:
    s = pin(pointer_enter(IDLE, "a1"))
    assert outside_click(s) == IDLE
    hovering = pointer_enter(IDLE, "a1")
    assert outside_click(hovering) == hovering


def test_pin_needs_hover() -> None:
    assert pin(IDLE) == IDLE


def test_click_opens_detail_from_any_state() -> None:
    for start in (IDLE, pointer_enter(IDLE, "a1"), pin(pointer_enter(IDLE, "a1"))):
        s = click(start, "a3")
        assert s == MatrixState(Phase.DETAIL_OPEN, "a3")
        assert s.detail_id == "a3"
        assert s.tooltip_id is None


def test_dismiss_closes_detail() -> None:
    s = click(IDLE, "a1")
    assert dismiss(s) == IDLE
    assert pointer_leave(s) == s


def test_escape_always_returns_idle() -> None:
    states = [
        IDLE,
        pointer_enter(IDLE, "a1"),
        pin(pointer_enter(IDLE, "a1")),
        click(IDLE, "a1"),
    ]
    for s in states:
        assert escape(s) == IDLE


def test_states_are_not_mutated() -> None:
    s = pointer_enter(IDLE, "a1")
    pin(s)
    assert s.phase is Phase.HOVERING
