"""Fulfillment handlers behind ``POST /``.

A handler receives the merged submission payload and returns the
``retval``/``retmsg`` pair the widget classifies.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import Any

from voice_trigger_workflows.widget.submission import FulfillmentResponse

logger = logging.getLogger(__name__)

FulfillmentHandler = Callable[[dict[str, Any]], FulfillmentResponse]


def acknowledge(payload: dict[str, Any]) -> FulfillmentResponse:
    """Log the request and report success without doing anything else."""

    logger.info(
        "Fulfillment request received",
        extra={"interaction_id": payload.get("interactionId"), "fields": sorted(payload)},
    )
    return FulfillmentResponse(retval=0, retmsg="Request received")


def load_handler(path: str) -> FulfillmentHandler:
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Handler must look like 'package.module:function', got {path!r}")
    module = importlib.import_module(module_name)
    handler = getattr(module, attr, None)
    if not callable(handler):
        raise ValueError(f"{path!r} is not callable")
    return handler
