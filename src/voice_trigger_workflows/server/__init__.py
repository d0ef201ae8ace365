"""FastAPI server adapter for voice-trigger-workflows.

Design intent:
- Keep submission and classification logic in `voice_trigger_workflows.widget.*`
- Keep server-specific concerns (routing, CORS, static assets) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from voice_trigger_workflows.server.app import create_app
