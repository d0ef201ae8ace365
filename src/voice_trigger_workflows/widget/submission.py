"""Submit a completed action form to its fulfillment endpoint.

The payload is built synchronously from the form store and the interaction
context; the HTTP round trip runs on an executor. Callers get a ``Future`` for
the outcome and are free to move the UI on before it resolves.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol
from urllib.parse import urljoin

import requests
from pydantic import BaseModel, JsonValue, StrictInt, ValidationError

from .catalog import Action
from .context import InteractionContext
from .fields import render_form
from .form_store import FormStateStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 6.0
KNOWN_FAILURE_CODES = frozenset({-1, 1, 2})


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNRECOGNIZED_FAILURE = "unrecognized_failure"
    TRANSPORT_FAILURE = "transport_failure"


class FulfillmentResponse(BaseModel):
    """Body returned by a fulfillment endpoint."""

    retval: StrictInt
    retmsg: str | None = ""


class _ResponseBody(BaseModel):
    # Any JSON value is accepted here; classification decides what it means.
    retval: JsonValue
    retmsg: JsonValue = ""


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    kind: OutcomeKind
    retval: JsonValue = None
    retmsg: JsonValue = ""
    status_code: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def message(self) -> str:
        if self.kind is OutcomeKind.SUCCESS:
            return "Success"
        if self.kind is OutcomeKind.KNOWN_FAILURE:
            return f"Error {self.retval}: {self.retmsg}"
        if self.kind is OutcomeKind.UNRECOGNIZED_FAILURE:
            return f"Unhandled Error Code {self.retval}: {self.retmsg}"
        return "Submission did not complete"

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {"kind": self.kind.value, "message": self.message}
        if self.kind is not OutcomeKind.TRANSPORT_FAILURE:
            out["retval"] = self.retval
            out["retmsg"] = self.retmsg
        if self.status_code is not None:
            out["status_code"] = self.status_code
        if self.error is not None:
            out["error"] = self.error
        return out


def classify_response(data: object, *, status_code: int | None = None) -> SubmissionOutcome:
    """Map a decoded response body onto an outcome.

    Bodies that are not an object with a ``retval`` key count as transport
    failures. Codes compare strictly: ``"0"`` or ``true`` is not code 0 or 1,
    while ``1.0`` is code 1.
    """

    try:
        response = _ResponseBody.model_validate(data)
    except ValidationError as e:
        return SubmissionOutcome(
            kind=OutcomeKind.TRANSPORT_FAILURE,
            status_code=status_code,
            error=f"Malformed response: {e.error_count()} validation error(s)",
        )

    code = _numeric_code(response.retval)
    if code == 0:
        kind = OutcomeKind.SUCCESS
    elif code in KNOWN_FAILURE_CODES:
        kind = OutcomeKind.KNOWN_FAILURE
    else:
        kind = OutcomeKind.UNRECOGNIZED_FAILURE
    return SubmissionOutcome(
        kind=kind,
        retval=code if code is not None else response.retval,
        retmsg=response.retmsg,
        status_code=status_code,
    )


def _numeric_code(value: JsonValue) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def build_payload(
    *,
    action: Action,
    action_id: int,
    form_store: FormStateStore,
    context: InteractionContext,
    max_datetime: str = "",
) -> dict[str, Any]:
    """Form values keyed by parameter name, overlaid with the selected task.

    Task fields are merged last and win on key collisions.
    """

    body: dict[str, Any] = {}
    for spec in render_form(action, action_id, max_datetime=max_datetime):
        body[spec.name] = form_store.read(action_id, spec.name)
    return {**body, **context.selected_task_record()}


class SubmissionClient:
    """Thin requests wrapper that posts JSON with a fixed timeout."""

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._base_url = base_url
        self._timeout = timeout_seconds
        self._session = session or requests.Session()
        self._http = ThreadPoolExecutor(max_workers=4, thread_name_prefix="vtw-http")

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def resolve(self, url: str) -> str:
        if not self._base_url:
            return url
        return urljoin(self._base_url, url)

    def post(self, url: str, payload: dict[str, Any]) -> SubmissionOutcome:
        """POST ``payload`` and classify the reply.

        ``timeout_seconds`` bounds the whole round trip. The requests timeout
        only limits each socket wait, so a server trickling bytes could hold
        the call open indefinitely; the wall-clock wait below cuts it off.
        """

        target = self.resolve(url)
        request = self._http.submit(
            self._session.post,
            target,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=self._timeout,
        )
        try:
            resp = request.result(timeout=self._timeout)
        except FutureTimeoutError:
            # The worker is abandoned; its late result is never read.
            request.cancel()
            logger.warning(
                "Submission exceeded its time budget",
                extra={"url": target, "timeout_seconds": self._timeout},
            )
            return SubmissionOutcome(
                kind=OutcomeKind.TRANSPORT_FAILURE,
                error=f"Timeout: no complete response within {self._timeout}s",
            )
        except requests.Timeout as e:
            logger.warning(
                "Submission timed out", extra={"url": target, "timeout_seconds": self._timeout}
            )
            return SubmissionOutcome(kind=OutcomeKind.TRANSPORT_FAILURE, error=f"Timeout: {e}")
        except requests.RequestException as e:
            logger.exception("Submission failed", extra={"url": target})
            return SubmissionOutcome(kind=OutcomeKind.TRANSPORT_FAILURE, error=str(e))

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning(
                "Submission returned an undecodable body",
                extra={"url": target, "status_code": resp.status_code},
            )
            return SubmissionOutcome(
                kind=OutcomeKind.TRANSPORT_FAILURE, status_code=resp.status_code, error=str(e)
            )

        logger.info(
            "Submission result",
            extra={"url": target, "status_code": resp.status_code, "response": data},
        )
        outcome = classify_response(data, status_code=resp.status_code)
        if outcome.kind is OutcomeKind.TRANSPORT_FAILURE:
            logger.warning("Submission returned a malformed body", extra={"url": target})
        return outcome

    def close(self) -> None:
        self._http.shutdown(wait=False, cancel_futures=True)
        self._session.close()


class Notifier(Protocol):
    """Channel for user-visible submission feedback."""

    def notify(self, outcome: SubmissionOutcome) -> None: ...


class LoggingNotifier:
    def notify(self, outcome: SubmissionOutcome) -> None:
        level = logging.INFO if outcome.ok else logging.WARNING
        logger.log(level, outcome.message, extra={"outcome": outcome.kind.value})


class CallbackNotifier:
    def __init__(self, callback: Callable[[SubmissionOutcome], None]) -> None:
        self._callback = callback

    def notify(self, outcome: SubmissionOutcome) -> None:
        self._callback(outcome)


class SubmissionPipeline:
    """Runs submissions off the caller's thread and reports their outcome.

    Transport failures are only logged unless ``notify_transport_failures`` is
    set; classified outcomes always reach the notifier.
    """

    def __init__(
        self,
        *,
        client: SubmissionClient,
        notifier: Notifier | None = None,
        executor: Executor | None = None,
        notify_transport_failures: bool = False,
    ) -> None:
        self._client = client
        self._notifier: Notifier = notifier or LoggingNotifier()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=4, thread_name_prefix="vtw-submit"
        )
        self._notify_transport_failures = notify_transport_failures

    @property
    def client(self) -> SubmissionClient:
        return self._client

    def dispatch(self, url: str, payload: dict[str, Any]) -> Future[SubmissionOutcome]:
        future = self._executor.submit(self._client.post, url, payload)
        future.add_done_callback(self._deliver)
        return future

    def _deliver(self, future: Future[SubmissionOutcome]) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("Submission crashed", exc_info=exc)
            return
        outcome = future.result()
        if outcome.kind is OutcomeKind.TRANSPORT_FAILURE and not self._notify_transport_failures:
            return
        try:
            self._notifier.notify(outcome)
        except Exception:
            logger.exception("Notifier failed", extra={"outcome": outcome.kind.value})

    def shutdown(self, *, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
        self._client.close()
