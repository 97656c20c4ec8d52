"""Execution status reconciler.

Turns the execution service's raw JSON into exactly one outcome variant and
the notification that goes with it. The variant is picked by looking up the
payload's ``status`` in ``OUTCOME_TYPES``; anything not listed there is a
success. Each variant decides for itself which trace and output the viewer
may show.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from exceptions import MalformedPayloadError
from notifications import Notification
from trace_model import EMPTY_TRACE, Step, Trace

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Code executed successfully"


class _Outcome(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    status: ClassVar[str]

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # the service sends null for "nothing here"
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Success(_Outcome):
    status: ClassVar[str] = "success"

    steps: tuple[Step, ...] = ()
    output: str = ""

    @property
    def trace(self) -> Trace:
        return Trace(self.steps)

    def visible_trace(self) -> Trace:
        return self.trace

    def visible_output(self) -> str:
        return self.output

    def notification(self) -> Notification:
        return Notification.success(SUCCESS_MESSAGE)


class CompileError(_Outcome):
    """Execution never started: there is no trace and no output."""

    status: ClassVar[str] = "compile_error"

    error_type: str = "SyntaxError"
    line_no: Optional[int] = None
    message: str = ""

    def visible_trace(self) -> Trace:
        return EMPTY_TRACE

    def visible_output(self) -> str:
        return ""

    def notification(self) -> Notification:
        if self.line_no is None:
            return Notification.error(f"{self.error_type}: {self.message}")
        return Notification.error(f"{self.error_type} on line {self.line_no}: {self.message}")


class RuntimeFailure(_Outcome):
    """Execution stopped part way: the partial trace is kept, the output is not."""

    status: ClassVar[str] = "runtime_error"

    steps: tuple[Step, ...] = ()
    message: str = ""

    @property
    def trace(self) -> Trace:
        return Trace(self.steps)

    def visible_trace(self) -> Trace:
        return self.trace

    def visible_output(self) -> str:
        return ""

    def notification(self) -> Notification:
        return Notification.error(f"Runtime error: {self.message}")


ExecutionOutcome = Union[Success, CompileError, RuntimeFailure]

# Payloads without one of these statuses are successes
OUTCOME_TYPES = {
    CompileError.status: CompileError,
    RuntimeFailure.status: RuntimeFailure,
}


@dataclass(frozen=True)
class Reconciliation:
    outcome: ExecutionOutcome
    notification: Notification


def classify(payload: Any) -> ExecutionOutcome:
    """Pick the single outcome variant for an execution service payload."""
    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            f"expected a JSON object from the execution service, got {type(payload).__name__}",
            payload,
        )

    status = payload.get("status")
    if status is not None and not isinstance(status, str):
        raise MalformedPayloadError(
            f"expected a string status, got {type(status).__name__}", payload
        )

    outcome_type = OUTCOME_TYPES.get(status, Success)
    try:
        return outcome_type.model_validate(payload)
    except ValidationError as e:
        raise MalformedPayloadError(
            f"invalid {outcome_type.status} payload: {e.error_count()} error(s)", payload
        ) from e


def reconcile(payload: Any) -> Reconciliation:
    outcome = classify(payload)
    logger.info(
        "Execution finished with status %s (%d steps)",
        outcome.status,
        len(outcome.visible_trace()),
    )
    return Reconciliation(outcome, outcome.notification())
