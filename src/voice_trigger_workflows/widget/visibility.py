"""Decide whether the trigger is offered for the selected interaction."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

TELEPHONY_MEDIA_TYPE = "telephony"


def should_show(task_selected: Mapping[str, Any] | None) -> bool:
    """Return True only for a selected voice (telephony) interaction."""

    if task_selected is None:
        return False
    return task_selected.get("mediaType") == TELEPHONY_MEDIA_TYPE
