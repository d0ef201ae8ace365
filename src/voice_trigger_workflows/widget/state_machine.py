"""Explicit UI state machine for the trigger widget.

The widget is in exactly one of three states: closed, menu open, or a single
action modal open. The selected action lives on the snapshot itself, so
"a selection implies the main panel is open" and "at most one modal" hold by
construction instead of by keeping separate flags in sync.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class WidgetState(str, Enum):
    CLOSED = "closed"
    MENU_OPEN = "menu_open"
    MODAL_OPEN = "modal_open"


class WidgetEvent(str, Enum):
    TOGGLE = "toggle"
    SELECT = "select"
    CANCEL = "cancel"
    SUBMIT = "submit"


ALLOWED_TRANSITIONS: dict[tuple[WidgetState, WidgetEvent], WidgetState] = {
    (WidgetState.CLOSED, WidgetEvent.TOGGLE): WidgetState.MENU_OPEN,
    (WidgetState.MENU_OPEN, WidgetEvent.TOGGLE): WidgetState.CLOSED,
    (WidgetState.MENU_OPEN, WidgetEvent.SELECT): WidgetState.MODAL_OPEN,
    # Toggling the trigger while a modal is open cancels it.
    (WidgetState.MODAL_OPEN, WidgetEvent.TOGGLE): WidgetState.CLOSED,
    (WidgetState.MODAL_OPEN, WidgetEvent.SELECT): WidgetState.MODAL_OPEN,
    (WidgetState.MODAL_OPEN, WidgetEvent.CANCEL): WidgetState.CLOSED,
    (WidgetState.MODAL_OPEN, WidgetEvent.SUBMIT): WidgetState.CLOSED,
}


class IllegalTransitionError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class WidgetSnapshot:
    state: WidgetState = WidgetState.CLOSED
    action_id: int | None = None

    def __post_init__(self) -> None:
        if (self.state is WidgetState.MODAL_OPEN) != (self.action_id is not None):
            raise ValueError(
                f"Inconsistent snapshot: state={self.state.value} action_id={self.action_id}"
            )

    @property
    def main_open(self) -> bool:
        return self.state is not WidgetState.CLOSED

    @property
    def menu_open(self) -> bool:
        # The menu is hidden while a modal is showing.
        return self.state is WidgetState.MENU_OPEN

    @property
    def selected_action_id(self) -> int | None:
        return self.action_id

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {"state": self.state.value}
        if self.action_id is not None:
            out["action_id"] = self.action_id
        return out


CLOSED = WidgetSnapshot()


def transition(
    *, current: WidgetSnapshot, event: WidgetEvent, action_id: int | None = None
) -> WidgetSnapshot:
    target = ALLOWED_TRANSITIONS.get((current.state, event))
    if target is None:
        raise IllegalTransitionError(
            f"Illegal transition: {current.state.value} --{event.value}-->"
        )
    if event is WidgetEvent.SELECT:
        if action_id is None:
            raise IllegalTransitionError("select requires an action id")
        return WidgetSnapshot(state=target, action_id=action_id)
    if target is WidgetState.MODAL_OPEN:
        return WidgetSnapshot(state=target, action_id=current.action_id)
    return WidgetSnapshot(state=target)
