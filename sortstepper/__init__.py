from .algorithms import ALGORITHMS, DESCRIPTIONS, Algorithm, UnknownAlgorithmError, get_strategy
from .engine import CancelToken, RunState, RunStateError, SortRun, StepEvent, paced, run
from .parsing import parse_values

__version__ = "0.1.0"

__all__ = [
    "ALGORITHMS", "DESCRIPTIONS", "Algorithm", "UnknownAlgorithmError", "get_strategy",
    "CancelToken", "RunState", "RunStateError", "SortRun", "StepEvent", "paced", "run",
    "parse_values",
]
