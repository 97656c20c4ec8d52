import logging
from typing import Optional

from exceptions import ServiceError
from trace_model import Step

logger = logging.getLogger(__name__)

EMPTY_FALLBACK = "No explanation available for this step."
FAILURE_FALLBACK = "Could not load an explanation. Try again."


class ExplanationOverlay:
    """On-demand explanation of the step being viewed.

    Only the latest request may write to the panel. Each request takes a
    sequence number; a response whose number is no longer the latest is
    dropped, whether it succeeded or failed.
    """

    def __init__(self, client):
        self._client = client
        self._seq = 0
        self.loading = False
        self.text = ""
        self.failed = False

    @property
    def display_text(self) -> str:
        if self.loading:
            return ""
        if self.failed:
            return FAILURE_FALLBACK
        return self.text or EMPTY_FALLBACK

    def reset(self) -> None:
        self._seq += 1
        self.loading = False
        self.text = ""
        self.failed = False

    async def request_explanation(self, source_text: str, step: Optional[Step]) -> bool:
        """Ask for an explanation of ``step``; returns False if the response was stale."""
        self._seq += 1
        token = self._seq
        self.loading = True
        self.text = ""
        self.failed = False

        try:
            text = await self._client.explain(source_text, step)
            failed = False
        except ServiceError as e:
            logger.warning("Explanation request %d failed: %s", token, e)
            text, failed = "", True

        if token != self._seq:
            logger.debug("Dropping stale explanation %d (latest is %d)", token, self._seq)
            return False

        self.text = text
        self.failed = failed
        self.loading = False
        return True
