"""Interaction context handed over by the agent desktop."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

TaskRecord = dict[str, Any]


class NoTaskSelectedError(RuntimeError):
    pass


@dataclass(frozen=True)
class InteractionContext:
    """A private snapshot of the host's task map and focused task.

    Built through :meth:`capture`, which deep-copies both inputs so the host
    can keep mutating its own objects.
    """

    task_map: dict[str, TaskRecord] = field(default_factory=dict)
    task_selected: TaskRecord | None = None

    @classmethod
    def capture(
        cls,
        task_map: Mapping[str, Mapping[str, Any]] | None,
        task_selected: Mapping[str, Any] | None,
    ) -> InteractionContext:
        tasks = {str(k): copy.deepcopy(dict(v)) for k, v in (task_map or {}).items()}
        selected = copy.deepcopy(dict(task_selected)) if task_selected is not None else None
        return cls(task_map=tasks, task_selected=selected)

    @property
    def interaction_id(self) -> str | None:
        if self.task_selected is None:
            return None
        value = self.task_selected.get("interactionId")
        return str(value) if value is not None else None

    def selected_task_record(self) -> TaskRecord:
        """Deep copy of the task map entry for the focused interaction.

        Falls back to the focused task itself when the map has no entry for it.
        """

        if self.task_selected is None:
            raise NoTaskSelectedError("No interaction is selected")
        key = self.interaction_id
        record = self.task_map.get(key) if key is not None else None
        return copy.deepcopy(record if record is not None else self.task_selected)
