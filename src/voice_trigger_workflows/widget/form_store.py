"""Scratch storage for values typed into an open action form."""

from __future__ import annotations


class FormStateStore:
    """Field values keyed by ``(action_id, parameter name)``.

    Unwritten fields read as the empty string. ``clear`` drops everything held
    for one action so a later open of the same action starts blank.
    """

    def __init__(self) -> None:
        self._values: dict[int, dict[str, str]] = {}

    def read(self, action_id: int, name: str) -> str:
        return self._values.get(action_id, {}).get(name, "")

    def write(self, action_id: int, name: str, value: str) -> None:
        self._values.setdefault(action_id, {})[name] = value

    def clear(self, action_id: int) -> None:
        self._values.pop(action_id, None)

    def values_for(self, action_id: int) -> dict[str, str]:
        return dict(self._values.get(action_id, {}))
