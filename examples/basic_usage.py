#!/usr/bin/env python3
"""Programmatic widget example.

This drives the widget the way the agent desktop would:

* load an action catalog
* hand over the selected telephony interaction
* open the menu, pick an action, fill in its form and submit

The fulfillment server must be running (``voice-trigger-workflows serve``).
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from voice_trigger_workflows.core.config import WidgetConfig
from voice_trigger_workflows.logging import configure_logging
from voice_trigger_workflows.widget.controller import VoiceTriggerWidget
from voice_trigger_workflows.widget.submission import CallbackNotifier, SubmissionOutcome

CATALOG = [
    {
        "name": "Scheduled Callback",
        "url": "/",
        "parameters": [
            {"name": "callbackNumber", "label": "Callback number", "type": "input"},
            {"name": "queue", "label": "Queue", "type": "select", "values": ["Sales", "Support"]},
            {"name": "callbackTime", "label": "Callback time", "type": "datetime"},
        ],
    }
]


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Submit a scheduled callback (example).")
    parser.add_argument("--base-url", default="http://localhost:8080", help="Fulfillment server")
    parser.add_argument("--number", required=True, help="Number to call back")
    parser.add_argument("--when", required=True, help='Local time, e.g. "2026-11-01T09:30"')
    return parser.parse_args(argv)


def _show(outcome: SubmissionOutcome) -> None:
    print(outcome.message)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    config = WidgetConfig(fulfillment_base_url=args.base_url, notify_transport_failures=True)
    configure_logging(config.log_level, debug=config.debug)

    widget = VoiceTriggerWidget(CATALOG, config=config, notifier=CallbackNotifier(_show))
    task = {"interactionId": "demo-1", "mediaType": "telephony", "ani": "+15550100"}
    widget.set_interaction_context({"demo-1": task}, task)

    try:
        widget.toggle()
        widget.select(0)
        widget.write_field("callbackNumber", args.number)
        widget.write_field("callbackTime", args.when)
        outcome = widget.submit().result()
    finally:
        widget.close()

    return 0 if outcome.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
