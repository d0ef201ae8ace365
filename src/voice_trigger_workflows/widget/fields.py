"""Turn parameter descriptors into input field specifications.

Markup is the host's job; this module only says which control to draw for a
parameter, with which constraints and initial value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from .catalog import Action, Parameter, ParameterType

MAX_CALLBACK_DAYS = 30


@dataclass(frozen=True, slots=True)
class FieldSpec:
    action_id: int
    name: str
    label: str
    control: str
    default: str = ""
    options: tuple[str, ...] = field(default=())
    max_value: str | None = None

    @property
    def key(self) -> tuple[int, str]:
        return (self.action_id, self.name)

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "action_id": self.action_id,
            "name": self.name,
            "label": self.label,
            "control": self.control,
            "default": self.default,
        }
        if self.options:
            out["options"] = list(self.options)
        if self.max_value is not None:
            out["max"] = self.max_value
        return out


def max_callback_instant(now: datetime | None = None, *, days: int = MAX_CALLBACK_DAYS) -> str:
    """Latest instant a datetime field accepts, as an ISO-8601 UTC string."""

    start = now if now is not None else datetime.now(tz=UTC)
    if start.tzinfo is None:
        start = start.replace(tzinfo=UTC)
    bound = start.astimezone(UTC) + timedelta(days=days)
    return bound.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render_field(parameter: Parameter, action_id: int, *, max_datetime: str) -> FieldSpec | None:
    kind = parameter.kind
    if kind is ParameterType.INPUT:
        return FieldSpec(
            action_id=action_id, name=parameter.name, label=parameter.label, control="text"
        )
    if kind is ParameterType.SELECT:
        options = tuple(parameter.values)
        return FieldSpec(
            action_id=action_id,
            name=parameter.name,
            label=parameter.label,
            control="select",
            default=options[0] if options else "",
            options=options,
        )
    if kind is ParameterType.DATETIME:
        return FieldSpec(
            action_id=action_id,
            name=parameter.name,
            label=parameter.label,
            control="datetime-local",
            max_value=max_datetime,
        )
    # Unknown types are tolerated so newer catalogs still load.
    return None


def render_form(action: Action, action_id: int, *, max_datetime: str) -> list[FieldSpec]:
    fields: list[FieldSpec] = []
    for parameter in action.parameters:
        spec = render_field(parameter, action_id, max_datetime=max_datetime)
        if spec is not None:
            fields.append(spec)
    return fields
