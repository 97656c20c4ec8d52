"""Playback session: submission, clearing and explanations for one viewer.

The session owns the "current outcome" slot. The outcome and the trace model
derived from it live in one immutable ``SessionSnapshot`` that is swapped in a
single assignment, so readers never see half of a submission.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from config import Settings
from exceptions import ServiceError
from explanation import ExplanationOverlay
from notifications import NotificationCenter
from playback import PlaybackController
from reconciler import ExecutionOutcome, Success, reconcile
from service_client import ExecutionClient, ExplanationClient
from trace_model import Step, TraceModel

logger = logging.getLogger(__name__)

SUBMIT_FAILED_MESSAGE = "Error sending data"


@dataclass(frozen=True)
class SessionSnapshot:
    outcome: Optional[ExecutionOutcome] = None
    model: TraceModel = field(default_factory=TraceModel)


@dataclass(frozen=True)
class SourceLine:
    number: int
    text: str
    active: bool


class PlaybackSession:
    def __init__(
        self,
        execution_client,
        explanation_client,
        notifications: Optional[NotificationCenter] = None,
        controller: Optional[PlaybackController] = None,
    ):
        self._execution = execution_client
        self.notifications = notifications or NotificationCenter()
        self.controller = controller or PlaybackController()
        self.explanation = ExplanationOverlay(explanation_client)
        self._snapshot = SessionSnapshot()
        self._submission = 0

    @classmethod
    def from_settings(cls, settings: Settings, http_client=None) -> "PlaybackSession":
        return cls(
            ExecutionClient(settings.api_url, client=http_client, timeout=settings.timeout),
            ExplanationClient(settings.api_url, client=http_client, timeout=settings.timeout),
            notifications=NotificationCenter(ttl=settings.notification_seconds),
            controller=PlaybackController(interval=settings.autoplay_interval),
        )

    # --- Views ---

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def outcome(self) -> Optional[ExecutionOutcome]:
        return self._snapshot.outcome

    @property
    def model(self) -> TraceModel:
        return self._snapshot.model

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, Success)

    @property
    def visible_output(self) -> str:
        return self.model.output

    @property
    def current_step(self) -> Optional[Step]:
        return self.controller.current_step()

    @property
    def frame_label(self) -> str:
        return self.controller.frame_label()

    def locals_view(self) -> dict:
        step = self.current_step
        return dict(step.locals) if step else {}

    def source_view(self) -> list:
        step = self.current_step
        return [
            SourceLine(number, text, self.model.highlighted(number, step))
            for number, text in enumerate(self.model.source_lines, start=1)
        ]

    # --- Actions ---

    async def submit(self, code: str) -> Optional[ExecutionOutcome]:
        """Run ``code`` through the execution service and install the result.

        Returns the new outcome, or None if the submission failed in transport
        (state untouched) or was superseded by a newer one.
        """
        self._submission += 1
        token = self._submission

        try:
            payload = await self._execution.run(code)
            result = reconcile(payload)
        except ServiceError as e:
            if token != self._submission:
                return None
            logger.warning("Submission %d failed: %s", token, e)
            self.notifications.error(SUBMIT_FAILED_MESSAGE)
            return None

        if token != self._submission:
            logger.debug("Dropping stale submission %d (latest is %d)", token, self._submission)
            return None

        self.explanation.reset()
        self._install(SessionSnapshot(result.outcome, TraceModel.from_outcome(result.outcome, code)))
        self.notifications.post(result.notification)
        return result.outcome

    def clear(self) -> None:
        """Forget the current submission (the editor's Clear button)."""
        self._submission += 1
        self.explanation.reset()
        self._install(SessionSnapshot())

    async def explain(self) -> bool:
        return await self.explanation.request_explanation(self.model.source_text, self.current_step)

    def _install(self, snapshot: SessionSnapshot):
        self.controller.pause()
        self._snapshot = snapshot
        self.controller.load(snapshot.model.trace)
