"""
Start / Stop / Reset lifecycle behind the visualizer.

The controller owns the text the user submitted, the values on screen, the
selected algorithm and at most one active :class:`~sortstepper.engine.SortRun`.
The host calls :meth:`SortController.tick` every frame with a millisecond
clock; one step is pulled whenever ``delay_ms`` has passed since the previous one.
"""

import logging

from .algorithms import description, get_strategy
from .engine import CancelToken, RunState, run
from .parsing import parse_values

logger = logging.getLogger(__name__)


class SortController:
    def __init__(self, delay_ms=100):
        self.delay_ms    = delay_ms
        self.text        = ""
        self.values      = ()
        self.active      = ()
        self.description = ""
        self.selected    = None
        self.error       = ""
        self.run         = None
        self._events     = None
        self._token      = None
        self._last_ms    = None

    @property
    def sorting(self) -> bool:
        return self._events is not None

    @property
    def state(self) -> RunState:
        return self.run.state if self.run is not None else RunState.IDLE

    def submit(self, text: str):
        if self.sorting:
            return
        self.text   = text
        self.values = tuple(parse_values(text))
        self.active = ()
        self.run    = None

    def select(self, algorithm):
        """Choose the algorithm the next start() uses when given none."""
        if self.sorting:
            return
        get_strategy(algorithm)
        self.selected = algorithm
        self.description = description(algorithm)

    def start(self, algorithm=None, now_ms=0):
        if self.sorting:
            return
        if algorithm is None:
            algorithm = self.selected
        if algorithm is None:
            return
        self.selected = algorithm
        self.error = ""
        self._token = CancelToken()
        self.run = run(self.values, algorithm, self._token)
        self._events = iter(self.run)
        self.description = description(algorithm)
        # the first step is due on the very next tick
        self._last_ms = now_ms - self.delay_ms

    def tick(self, now_ms):
        """Advance by at most one step; returns the StepEvent shown, if any."""
        if not self.sorting or now_ms - self._last_ms < self.delay_ms:
            return None
        self._last_ms = now_ms
        try:
            ev = next(self._events, None)
        except Exception as e:
            # the run is already FAILED; keep the window alive and show why
            self.error = f"{type(e).__name__}: {e}"
            self._finish()
            return None
        if ev is None:
            self._finish()
            return None
        self.values = ev.values
        self.active = ev.indices
        return ev

    def stop(self):
        if not self.sorting:
            return
        self._token.cancel()
        # one more pull lets the run see the token and end as cancelled
        next(self._events, None)
        self._finish()

    def reset(self, text=None):
        """Stop any run and show freshly parsed input (the last submitted text by default)."""
        self.stop()
        self.description = ""
        self.error = ""
        self.submit(self.text if text is None else text)

    def _finish(self):
        self._events = None
        self.active  = ()
        logger.debug("run finished: %s", self.state.value)
