"""CLI entrypoint for voice-trigger-workflows.

Subcommands:
- ``serve``: run the fulfillment server
- ``menu``: print the menu and action forms a catalog produces
- ``submit``: fill in and submit one action against a task record
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from voice_trigger_workflows import __version__
from voice_trigger_workflows.core.config import WidgetConfig
from voice_trigger_workflows.logging import configure_logging
from voice_trigger_workflows.widget.catalog import UnknownActionError, load_catalog_file
from voice_trigger_workflows.widget.controller import (
    UnknownFieldError,
    VoiceTriggerWidget,
    WidgetHiddenError,
)

logger = logging.getLogger(__name__)


def _parse_fields(values: list[str] | None) -> dict[str, str]:
    fields: dict[str, str] = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Expected name=value, got {item!r}")
        fields[name.strip()] = value
    return fields


def _load_task(path: Path) -> dict[str, Any]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Task file must contain a JSON object: {path}")
    return raw


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voice-trigger-workflows",
        description="Configuration-driven trigger actions for voice interactions",
    )
    parser.add_argument(
        "--version", action="version", version=f"voice-trigger-workflows {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the fulfillment server")
    serve.add_argument("--host", default=None, help="Bind address (defaults to HOST or 0.0.0.0)")
    serve.add_argument(
        "--port", type=int, default=None, help="Listen port (defaults to PORT or 8080)"
    )

    menu = subparsers.add_parser("menu", help="Print the menu and forms for a catalog")
    menu.add_argument("--catalog", type=Path, required=True, help="Action catalog JSON file")

    submit = subparsers.add_parser("submit", help="Submit one action for a task record")
    submit.add_argument("--catalog", type=Path, required=True, help="Action catalog JSON file")
    submit.add_argument(
        "--action", type=int, required=True, help="Action id (position in the catalog)"
    )
    submit.add_argument(
        "--task",
        type=Path,
        required=True,
        help="JSON file holding the selected task record (needs mediaType and interactionId)",
    )
    submit.add_argument(
        "--field",
        action="append",
        default=None,
        help="Form value as name=value; repeat for several fields",
    )
    submit.add_argument(
        "--base-url",
        default=None,
        help="Base URL for relative action URLs (overrides VTW_FULFILLMENT_BASE_URL)",
    )
    submit.add_argument(
        "--timeout-seconds",
        type=float,
        default=None,
        help="Submission timeout in seconds (overrides VTW_SUBMISSION_TIMEOUT_SECONDS)",
    )

    return parser


def _serve(args: argparse.Namespace, config: WidgetConfig) -> int:
    import uvicorn

    from voice_trigger_workflows.server.app import create_app
    from voice_trigger_workflows.server.config import ServerSettings

    settings = ServerSettings()
    configure_logging(settings.log_level, debug=config.debug)
    host = args.host or settings.host
    port = args.port or settings.port

    app = create_app(settings)
    logger.info("voice-trigger-workflows: listening on port %s", port, extra={"host": host})
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())
    return 0


def _menu(args: argparse.Namespace) -> int:
    catalog = load_catalog_file(args.catalog)
    widget = VoiceTriggerWidget(catalog)
    try:
        entries = [
            {
                "action_id": entry.action_id,
                "name": entry.name,
                "modal": widget.modal(entry.action_id).to_json(),
            }
            for entry in widget.menu()
        ]
    finally:
        widget.close()
    print(json.dumps(entries, indent=2, ensure_ascii=False))
    return 0


def _submit(args: argparse.Namespace, config: WidgetConfig) -> int:
    overrides: dict[str, object] = {}
    if args.base_url is not None:
        overrides["fulfillment_base_url"] = args.base_url
    if args.timeout_seconds is not None:
        overrides["submission_timeout_seconds"] = args.timeout_seconds
    if overrides:
        config = config.model_copy(update=overrides)

    catalog = load_catalog_file(args.catalog)
    task = _load_task(args.task)
    fields = _parse_fields(args.field)

    # The CLI reports every outcome, including timeouts.
    config = config.model_copy(update={"notify_transport_failures": True})
    widget = VoiceTriggerWidget(catalog, config=config)
    try:
        interaction_id = str(task.get("interactionId", ""))
        widget.set_interaction_context({interaction_id: task}, task)
        widget.toggle()
        widget.select(args.action)
        for name, value in fields.items():
            widget.write_field(name, value)
        outcome = widget.submit().result()
    finally:
        widget.close()

    print(json.dumps(outcome.to_json(), indent=2, ensure_ascii=False))
    return 0 if outcome.ok else 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = WidgetConfig()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "serve":
            return _serve(args, config)

        configure_logging(config.log_level, stream=sys.stderr, debug=config.debug)

        if args.command == "menu":
            return _menu(args)

        if args.command == "submit":
            return _submit(args, config)

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except (WidgetHiddenError, UnknownActionError, UnknownFieldError, ValidationError) as e:
        logger.error(str(e), extra={"command": args.command})
        print(str(e), file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
