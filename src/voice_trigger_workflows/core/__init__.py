"""Core configuration shared by the widget and the CLI."""

from voice_trigger_workflows.core.config import WidgetConfig

__all__ = ["WidgetConfig"]
