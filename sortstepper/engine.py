"""
Sort stepper engine.

``run(values, algorithm)`` returns a :class:`SortRun`. Iterating it drives the
chosen strategy over a private copy of ``values`` and yields one
:class:`StepEvent` per atomic mutation. The engine never sleeps; pacing is
the consumer's business (see :func:`paced`).
"""

import logging
import numbers
import threading
import time
from dataclasses import dataclass
from enum import Enum

from .algorithms import WRITE, display_name, get_strategy

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    FAILED    = "failed"


class RunStateError(RuntimeError):
    pass


@dataclass(frozen=True)
class StepEvent:
    """
    Snapshot of the sequence right after one mutation.

    Attributes
    ----------
    index   : int    — 0-based step number within the run
    values  : tuple  — full copy of the sequence
    indices : tuple  — positions touched by the mutation
    kind    : str    — "swap", "write" or "merge"
    """
    index:   int
    values:  tuple
    indices: tuple = ()
    kind:    str   = WRITE


class CancelToken:
    """Cooperative cancellation signal polled by the engine between steps."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class InvalidStepError(TypeError):
    pass


def _index_tuple(indices):
    try:
        items = tuple(indices)
    except TypeError:
        raise InvalidStepError(f"step indices must be an iterable of ints, got {indices!r}") from None
    if not all(isinstance(i, numbers.Integral) and not isinstance(i, bool) for i in items):
        raise InvalidStepError(f"step indices must be ints, got {items!r}")
    return tuple(int(i) for i in items)


def _normalize(step, buf):
    """
    Turn what a strategy yielded into ``(kind, indices)``.

    Accepted shapes: ``(kind, indices)``, ``(buf, indices)`` where the first item
    is the working buffer itself, or a bare iterable of indices.
    """
    if isinstance(step, (tuple, list)) and len(step) == 2:
        head, indices = step
        if isinstance(head, str):
            return head, _index_tuple(indices)
        if head is buf:
            return WRITE, _index_tuple(indices)
    if step is None:
        return WRITE, ()
    return WRITE, _index_tuple(step)


class SortRun:
    def __init__(self, values, algorithm, cancel=None):
        self.algorithm = algorithm
        self.cancel    = cancel if cancel is not None else CancelToken()
        self.state     = RunState.IDLE
        self.steps     = 0
        self.last      = None
        self.error     = None
        self._initial  = tuple(values)
        self._strategy = get_strategy(algorithm)

    @property
    def values(self) -> tuple:
        """Last observable sequence: the latest snapshot, or the input before any step."""
        return self.last.values if self.last is not None else self._initial

    @property
    def finished(self) -> bool:
        return self.state in (RunState.CANCELLED, RunState.COMPLETED, RunState.FAILED)

    def __iter__(self):
        if self.state is not RunState.IDLE:
            raise RunStateError(f"Run already {self.state.value}; start a new run")
        self.state = RunState.RUNNING
        return self._steps()

    def _steps(self):
        buf = list(self._initial)
        mutations = self._strategy(buf)
        logger.info("%s started on %d values", display_name(self.algorithm), len(buf))
        try:
            while True:
                # polled before resuming the strategy, so a cancel after the final
                # step ends CANCELLED with the sorted sequence as the last state
                if self.cancel.cancelled:
                    self.state = RunState.CANCELLED
                    logger.info("%s cancelled after %d steps",
                                display_name(self.algorithm), self.steps)
                    return
                try:
                    kind, indices = _normalize(next(mutations), buf)
                except StopIteration:
                    break
                self.last = StepEvent(self.steps, tuple(buf), indices, kind)
                self.steps += 1
                yield self.last
        except GeneratorExit:
            self.state = RunState.CANCELLED
            logger.info("%s abandoned after %d steps", display_name(self.algorithm), self.steps)
            raise
        except Exception as e:
            self.state = RunState.FAILED
            self.error = e
            logger.error("%s failed after %d steps: %s", display_name(self.algorithm), self.steps, e)
            raise
        finally:
            mutations.close()
        self.state = RunState.COMPLETED
        logger.info("%s completed in %d steps", display_name(self.algorithm), self.steps)


def run(values, algorithm, cancel=None) -> SortRun:
    return SortRun(values, algorithm, cancel)


def paced(events, delay: float, sleep=time.sleep):
    """Yield from ``events``, sleeping ``delay`` seconds after each one."""
    for ev in events:
        yield ev
        if delay > 0:
            sleep(delay)
