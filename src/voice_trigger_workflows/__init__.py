"""Voice Trigger Workflows.

A configuration-driven trigger menu for voice interactions:
- actions and their form fields come from a declarative catalog
- a small explicit state machine drives the menu and action modals
- completed forms are posted, with interaction context, to a fulfillment URL
"""

__version__ = "0.1.0"

from voice_trigger_workflows.core.config import WidgetConfig
from voice_trigger_workflows.widget.controller import VoiceTriggerWidget

__all__ = ["__version__", "VoiceTriggerWidget", "WidgetConfig"]
