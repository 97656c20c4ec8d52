"""Playback controller: the position within a trace, manual stepping and auto-play.

The controller is a plain state machine. Every transition is an ordinary
method call, so it can be exercised without a UI. Auto-play ticks come from
an asyncio task when a loop is running; otherwise the caller invokes
``tick()`` itself.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional

from config import AUTOPLAY_INTERVAL_MS
from timers import cancel_task, start_task
from trace_model import EMPTY_TRACE, Step, Trace

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    IDLE = "idle"
    PAUSED = "paused"
    PLAYING = "playing"


Listener = Callable[["PlaybackController"], None]


class PlaybackController:
    def __init__(self, interval: float = AUTOPLAY_INTERVAL_MS / 1000):
        self.interval = interval
        self._trace: Trace = EMPTY_TRACE
        self._position = 0
        self._state = PlaybackState.IDLE
        self._timer: Optional[asyncio.Task] = None
        self._stopped: Optional[asyncio.Event] = None
        self._listeners: List[Listener] = []

    # --- Views ---

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def position(self) -> int:
        return self._position

    @property
    def trace(self) -> Trace:
        return self._trace

    @property
    def playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    def at_end(self) -> bool:
        return self._position >= self._trace.last_index

    def current_step(self) -> Optional[Step]:
        if len(self._trace) == 0:
            return None
        return self._trace.at(self._position)

    def frame_label(self) -> str:
        return f"Frame {self._position + 1}/{len(self._trace) or 1}"

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def _changed(self):
        for listener in list(self._listeners):
            listener(self)

    # --- Transitions ---

    def load(self, trace: Trace) -> None:
        """Install a new trace (onNewTrace). Any running auto-play is stopped first."""
        self._stop_timer()
        self._trace = trace
        self._position = 0
        self._state = PlaybackState.PAUSED if len(trace) else PlaybackState.IDLE
        self._changed()

    def step_forward(self) -> None:
        if self._state is PlaybackState.IDLE or self.at_end():
            return
        self._position += 1
        self._changed()

    def step_backward(self) -> None:
        if self._state is PlaybackState.IDLE or self._position == 0:
            return
        self._position -= 1
        self._changed()

    def toggle_auto_play(self) -> None:
        if self._state is PlaybackState.IDLE:
            return
        if self._state is PlaybackState.PLAYING:
            self.pause()
            return

        # replay from the start once the end has been reached
        if self.at_end():
            self._position = 0
        self._state = PlaybackState.PLAYING
        self._timer = start_task(self._run)
        self._changed()

    def pause(self) -> None:
        if self._state is not PlaybackState.PLAYING:
            return
        self._stop_timer()
        self._state = PlaybackState.PAUSED
        self._changed()

    def tick(self) -> None:
        """One auto-play step. Stops (never loops) once the last step is shown."""
        if self._state is not PlaybackState.PLAYING:
            return
        if not self.at_end():
            self._position += 1
        if self.at_end():
            self._stop_timer()
            self._state = PlaybackState.PAUSED
            logger.debug("Auto-play finished at step %d", self._position)
        self._changed()

    async def wait_until_paused(self) -> None:
        """Wait for a running auto-play to finish or be stopped."""
        if self._state is not PlaybackState.PLAYING:
            return
        # created on demand, inside the running loop
        if self._stopped is None or self._stopped.is_set():
            self._stopped = asyncio.Event()
        await self._stopped.wait()

    # --- Timer ---

    async def _run(self):
        while self._state is PlaybackState.PLAYING:
            await asyncio.sleep(self.interval)
            self.tick()

    def _stop_timer(self):
        cancel_task(self._timer)
        self._timer = None
        if self._stopped is not None:
            self._stopped.set()
