"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Executor, Future
from datetime import UTC, datetime
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from voice_trigger_workflows.core.config import WidgetConfig
from voice_trigger_workflows.widget.controller import VoiceTriggerWidget
from voice_trigger_workflows.widget.submission import SubmissionClient, SubmissionPipeline

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


class InlineExecutor(Executor):
    """Runs submitted work on the calling thread so callbacks fire deterministically."""

    def submit(self, fn, /, *args, **kwargs):  # type: ignore[override]
        future: Future[Any] = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def inline_executor() -> Executor:
    return InlineExecutor()


@pytest.fixture
def catalog_json() -> list[dict[str, Any]]:
    """Provide a catalog with one action per parameter type, plus an empty one."""
    return [
        {
            "name": "Scheduled Callback",
            "url": "https://fulfillment.example.com/callback",
            "parameters": [
                {"name": "callbackNumber", "label": "Number", "type": "input"},
                {
                    "name": "queue",
                    "label": "Queue",
                    "type": "select",
                    "values": ["Sales", "Support"],
                },
                {"name": "callbackTime", "label": "When", "type": "datetime"},
            ],
        },
        {"name": "Escalate", "url": "/escalate"},
    ]


@pytest.fixture
def telephony_task() -> dict[str, Any]:
    return {"interactionId": "int-1", "mediaType": "telephony", "ani": "+15550100"}


@pytest.fixture
def task_map(telephony_task: dict[str, Any]) -> dict[str, dict[str, Any]]:
    return {"int-1": telephony_task}


@pytest.fixture
def make_session() -> Callable[..., Mock]:
    """Build a fake requests session whose POST answers with ``data``."""

    def _make(data: object = None, *, status_code: int = 200, error: Exception | None = None):
        session = Mock(spec=requests.Session)
        if error is not None:
            session.post.side_effect = error
            return session
        response = Mock(spec=requests.Response)
        response.status_code = status_code
        response.json.return_value = data
        session.post.return_value = response
        return session

    return _make


@pytest.fixture
def notifier() -> Mock:
    return Mock()


@pytest.fixture
def make_widget(
    catalog_json: list[dict[str, Any]],
    task_map: dict[str, dict[str, Any]],
    telephony_task: dict[str, Any],
    notifier: Mock,
) -> Callable[..., VoiceTriggerWidget]:
    """Build a visible widget wired to a fake session and an inline executor."""

    def _make(
        session: Mock,
        *,
        config: WidgetConfig | None = None,
        executor: Executor | None = None,
    ) -> VoiceTriggerWidget:
        config = config or WidgetConfig()
        pipeline = SubmissionPipeline(
            client=SubmissionClient(
                base_url=config.fulfillment_base_url,
                timeout_seconds=config.submission_timeout_seconds,
                session=session,
            ),
            notifier=notifier,
            executor=executor or InlineExecutor(),
            notify_transport_failures=config.notify_transport_failures,
        )
        widget = VoiceTriggerWidget(catalog_json, config=config, pipeline=pipeline, now=FIXED_NOW)
        widget.set_interaction_context(task_map, telephony_task)
        return widget

    return _make
