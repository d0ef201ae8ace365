"""Declarative action catalog supplied by the host desktop layout.

The catalog is an ordered list of actions. An action is identified by its
position in that list, so the catalog is frozen once loaded.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Iterator, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ParameterType(str, Enum):
    INPUT = "input"
    SELECT = "select"
    DATETIME = "datetime"


class UnknownActionError(LookupError):
    """Raised when an action id has no entry in the catalog.

    This means the UI and the catalog are out of sync, which is a host
    integration bug rather than a user error.
    """

    def __init__(self, action_id: object, size: int) -> None:
        super().__init__(f"No action with id {action_id!r} (catalog has {size} actions)")
        self.action_id = action_id
        self.size = size


class Parameter(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    label: str = ""
    # Kept as a plain string: unrecognised types must load and then be skipped.
    type: str = ""
    values: tuple[str, ...] = ()

    @field_validator("values", mode="before")
    @classmethod
    def _none_values(cls, v: object) -> object:
        return () if v is None else v

    @property
    def kind(self) -> ParameterType | None:
        try:
            return ParameterType(self.type)
        except ValueError:
            return None


class Action(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    url: str
    parameters: tuple[Parameter, ...] = Field(default=())

    @field_validator("parameters", mode="before")
    @classmethod
    def _none_parameters(cls, v: object) -> object:
        return () if v is None else v

    @model_validator(mode="after")
    def _unique_parameter_names(self) -> Action:
        seen: set[str] = set()
        for param in self.parameters:
            if param.name in seen:
                raise ValueError(
                    f"Duplicate parameter name {param.name!r} in action {self.name!r}"
                )
            seen.add(param.name)
        return self


class ActionCatalog(Sequence[Action]):
    """Immutable, index-addressed list of actions."""

    def __init__(self, actions: Sequence[Action] = ()) -> None:
        self._actions: tuple[Action, ...] = tuple(actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __getitem__(self, index):  # type: ignore[override]
        return self._actions[index]

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions)

    def get(self, action_id: int) -> Action:
        # bool is an int subclass and negative indexes would silently wrap.
        if (
            not isinstance(action_id, int)
            or isinstance(action_id, bool)
            or not 0 <= action_id < len(self._actions)
        ):
            raise UnknownActionError(action_id, len(self._actions))
        return self._actions[action_id]

    def entries(self) -> list[tuple[int, Action]]:
        return list(enumerate(self._actions))


def load_catalog(raw: Sequence[dict[str, Any]] | None) -> ActionCatalog:
    """Build a catalog from the host's JSON-shaped config.

    The input is deep-copied first so later mutation of the host object cannot
    leak into the loaded catalog.
    """

    if raw is None:
        return ActionCatalog()
    snapshot = copy.deepcopy(list(raw))
    return ActionCatalog([Action.model_validate(item) for item in snapshot])


def load_catalog_file(path: Path) -> ActionCatalog:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Catalog file must contain a JSON array: {path}")
    return load_catalog(raw)
