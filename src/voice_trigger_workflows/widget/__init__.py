"""Trigger widget domain.

This package holds first-class types for:
- the declarative action catalog
- the closed / menu / modal state machine
- per-action form fields and their scratch values
- submission of a completed form to its fulfillment endpoint
"""

from voice_trigger_workflows.widget.catalog import (
    Action,
    ActionCatalog,
    Parameter,
    ParameterType,
    UnknownActionError,
    load_catalog,
)
from voice_trigger_workflows.widget.controller import (
    MenuEntry,
    ModalSpec,
    UnknownFieldError,
    VoiceTriggerWidget,
    WidgetHiddenError,
)
from voice_trigger_workflows.widget.state_machine import (
    IllegalTransitionError,
    WidgetSnapshot,
    WidgetState,
)
from voice_trigger_workflows.widget.submission import OutcomeKind, SubmissionOutcome
from voice_trigger_workflows.widget.visibility import should_show

__all__ = [
    "Action",
    "ActionCatalog",
    "IllegalTransitionError",
    "MenuEntry",
    "ModalSpec",
    "OutcomeKind",
    "Parameter",
    "ParameterType",
    "SubmissionOutcome",
    "UnknownActionError",
    "UnknownFieldError",
    "VoiceTriggerWidget",
    "WidgetHiddenError",
    "WidgetSnapshot",
    "WidgetState",
    "load_catalog",
    "should_show",
]
