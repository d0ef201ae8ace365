"""The trigger widget: menu, per-action modals and submission.

This ties the pure pieces together. The host feeds in the action catalog and
the live interaction context; user clicks arrive as ``toggle``, ``select``,
``cancel`` and ``submit`` calls, each processed to completion before the next.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from voice_trigger_workflows.core.config import WidgetConfig

from .catalog import Action, ActionCatalog, load_catalog
from .context import InteractionContext
from .fields import FieldSpec, max_callback_instant, render_form
from .form_store import FormStateStore
from .state_machine import (
    CLOSED,
    IllegalTransitionError,
    WidgetEvent,
    WidgetSnapshot,
    WidgetState,
    transition,
)
from .submission import (
    Notifier,
    SubmissionClient,
    SubmissionOutcome,
    SubmissionPipeline,
    build_payload,
)
from .visibility import should_show

logger = logging.getLogger(__name__)


class WidgetHiddenError(RuntimeError):
    """Raised when the widget is driven while the trigger is not shown."""


class UnknownFieldError(LookupError):
    pass


@dataclass(frozen=True, slots=True)
class MenuEntry:
    action_id: int
    name: str


@dataclass(frozen=True, slots=True)
class ModalSpec:
    action_id: int
    title: str
    fields: tuple[FieldSpec, ...]
    cancel_label: str = "Cancel"
    submit_label: str = "Schedule"

    def to_json(self) -> dict[str, object]:
        return {
            "action_id": self.action_id,
            "title": self.title,
            "fields": [f.to_json() for f in self.fields],
            "cancel_label": self.cancel_label,
            "submit_label": self.submit_label,
        }


class VoiceTriggerWidget:
    """Configuration-driven trigger menu for voice interactions."""

    def __init__(
        self,
        config_json: Sequence[dict[str, Any]] | ActionCatalog | None = None,
        *,
        config: WidgetConfig | None = None,
        pipeline: SubmissionPipeline | None = None,
        notifier: Notifier | None = None,
        now: datetime | None = None,
    ) -> None:
        self._config = config or WidgetConfig()
        self._catalog = (
            config_json if isinstance(config_json, ActionCatalog) else load_catalog(config_json)
        )
        self._context = InteractionContext()
        self._snapshot: WidgetSnapshot = CLOSED
        self._forms = FormStateStore()
        self._visible = False
        self._theme = _theme_for(self._config.darkmode)
        # Fixed for the lifetime of the widget.
        self._max_datetime = max_callback_instant(now, days=self._config.max_callback_days)
        self._pipeline = pipeline or SubmissionPipeline(
            client=SubmissionClient(
                base_url=self._config.fulfillment_base_url,
                timeout_seconds=self._config.submission_timeout_seconds,
            ),
            notifier=notifier,
            notify_transport_failures=self._config.notify_transport_failures,
        )

    @property
    def catalog(self) -> ActionCatalog:
        return self._catalog

    @property
    def snapshot(self) -> WidgetSnapshot:
        return self._snapshot

    @property
    def state(self) -> WidgetState:
        return self._snapshot.state

    @property
    def forms(self) -> FormStateStore:
        return self._forms

    @property
    def context(self) -> InteractionContext:
        return self._context

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def max_datetime(self) -> str:
        return self._max_datetime

    @property
    def theme(self) -> str:
        return self._theme

    def set_darkmode(self, darkmode: str | None) -> str:
        self._theme = _theme_for(darkmode)
        return self._theme

    def set_interaction_context(
        self,
        task_map: Mapping[str, Mapping[str, Any]] | None,
        task_selected: Mapping[str, Any] | None,
    ) -> bool:
        """Take a fresh snapshot of the host context and re-evaluate visibility."""

        self._context = InteractionContext.capture(task_map, task_selected)
        visible = should_show(self._context.task_selected)
        if not visible and self._snapshot.state is not WidgetState.CLOSED:
            if self._snapshot.action_id is not None:
                self._forms.clear(self._snapshot.action_id)
            self._snapshot = CLOSED
            logger.debug("Trigger hidden; widget closed")
        self._visible = visible
        return visible

    # -- user events -------------------------------------------------------

    def toggle(self) -> WidgetSnapshot:
        self._require_visible()
        current = self._snapshot
        nxt = transition(current=current, event=WidgetEvent.TOGGLE)
        if current.action_id is not None:
            self._forms.clear(current.action_id)
        self._snapshot = nxt
        return nxt

    def select(self, action_id: int) -> ModalSpec:
        self._require_visible()
        action = self._catalog.get(action_id)
        current = self._snapshot
        nxt = transition(current=current, event=WidgetEvent.SELECT, action_id=action_id)
        if current.action_id is not None and current.action_id != action_id:
            self._forms.clear(current.action_id)
        self._snapshot = nxt

        modal = self._modal_for(action, action_id)
        entered = self._forms.values_for(action_id)
        for spec in modal.fields:
            if spec.default and spec.name not in entered:
                self._forms.write(action_id, spec.name, spec.default)
        return modal

    def cancel(self) -> WidgetSnapshot:
        current = self._snapshot
        nxt = transition(current=current, event=WidgetEvent.CANCEL)
        action_id = _open_modal_id(current)
        self._forms.clear(action_id)
        self._snapshot = nxt
        return nxt

    def submit(self) -> Future[SubmissionOutcome]:
        """Send the open form and close the widget straight away.

        The returned future resolves with the outcome; by then the widget is
        already closed and the form cleared, whatever the result.
        """

        self._require_visible()
        current = self._snapshot
        nxt = transition(current=current, event=WidgetEvent.SUBMIT)
        action_id = _open_modal_id(current)
        action = self._catalog.get(action_id)

        try:
            payload = build_payload(
                action=action,
                action_id=action_id,
                form_store=self._forms,
                context=self._context,
                max_datetime=self._max_datetime,
            )
            logger.info(
                "Submitting action",
                extra={"action": action.name, "url": action.url, "fields": sorted(payload)},
            )
            return self._pipeline.dispatch(action.url, payload)
        finally:
            self._forms.clear(action_id)
            self._snapshot = nxt

    # -- form access -------------------------------------------------------

    def write_field(self, name: str, value: str) -> None:
        action_id = self._open_action_id()
        self._field(action_id, name)
        self._forms.write(action_id, name, value)

    def read_field(self, name: str) -> str:
        action_id = self._open_action_id()
        self._field(action_id, name)
        return self._forms.read(action_id, name)

    # -- rendering ---------------------------------------------------------

    def menu(self) -> list[MenuEntry]:
        return [MenuEntry(action_id=i, name=a.name) for i, a in self._catalog.entries()]

    def modal(self, action_id: int) -> ModalSpec:
        return self._modal_for(self._catalog.get(action_id), action_id)

    def close(self) -> None:
        self._pipeline.shutdown(wait=False)

    # -- internals ---------------------------------------------------------

    def _modal_for(self, action: Action, action_id: int) -> ModalSpec:
        fields = render_form(action, action_id, max_datetime=self._max_datetime)
        return ModalSpec(
            action_id=action_id, title=f"Trigger {action.name}?", fields=tuple(fields)
        )

    def _require_visible(self) -> None:
        if not self._visible:
            raise WidgetHiddenError("The trigger is only available for telephony interactions")

    def _open_action_id(self) -> int:
        if self._snapshot.action_id is None:
            raise UnknownFieldError("No action form is open")
        return self._snapshot.action_id

    def _field(self, action_id: int, name: str) -> FieldSpec:
        for spec in self.modal(action_id).fields:
            if spec.name == name:
                return spec
        raise UnknownFieldError(f"Action {action_id} has no field {name!r}")


def _open_modal_id(snapshot: WidgetSnapshot) -> int:
    if snapshot.action_id is None:
        raise IllegalTransitionError(f"No action modal is open (state={snapshot.state.value})")
    return snapshot.action_id


def _theme_for(darkmode: str | None) -> str:
    return "dark" if darkmode == "true" else "light"
