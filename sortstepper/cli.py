import argparse
import logging
import sys
import time

from . import algorithms
from .config import load_settings
from .controller import SortController
from .engine import paced, run
from .parsing import parse_values
from .plugins import load_custom_sorter

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="sortstepper",
        description="Step through bubble, selection, insertion, merge and quick sort one mutation at a time.")
    parser.add_argument('--values', default="", help='Comma-separated numbers, e.g. "5,3,1"')
    parser.add_argument('--algorithm', default="bubble", help='Algorithm key (bubble, selection, insertion, merge, quick, or a loaded custom sorter); preselected in the window, Space starts it')
    parser.add_argument('--headless', action='store_true', help='Print every step to stdout instead of opening a window')
    parser.add_argument('--delay', type=int, help='Milliseconds between steps (default from settings, 100)')
    parser.add_argument('--config', help='Path to a JSON settings file')
    parser.add_argument('--load-sorter', action='append', default=[], metavar='PATH',
                        help='Load a custom sorter .py file (repeatable)')
    parser.add_argument('--sound', dest='sound', action='store_true', default=None, help='Play a tone per step')
    parser.add_argument('--no-sound', dest='sound', action='store_false', help='Disable step tones')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def format_values(values) -> str:
    return "[" + ", ".join(f"{v:g}" if isinstance(v, float) else str(v) for v in values) + "]"


def run_headless(values, algorithm, delay: float, out=None) -> int:
    out = out or sys.stdout
    sort_run = run(values, algorithm)
    print(f"{algorithms.display_name(algorithm)}: {format_values(values)}", file=out)
    for ev in paced(sort_run, delay, time.sleep):
        idx = ",".join(str(i) for i in ev.indices)
        print(f"step {ev.index + 1:>4}  {ev.kind:<5} [{idx}]  {format_values(ev.values)}", file=out)
    print(f"{sort_run.state.value}: {format_values(sort_run.values)} after {sort_run.steps} steps", file=out)
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    settings = load_settings(args.config)
    if args.delay is not None:
        if args.delay < 0:
            parser.error("--delay must not be negative")
        settings.step_delay_ms = args.delay
    if args.sound is not None:
        settings.sound = args.sound

    errors = []
    for path in args.load_sorter:
        _, err = load_custom_sorter(path)
        if err:
            errors.append(f"{path}: {err}")
            logger.error("custom sorter %s not loaded: %s", path, err)

    if args.algorithm not in algorithms.keys():
        parser.error(f"unknown algorithm {args.algorithm!r} (choose from {', '.join(algorithms.keys())})")

    if args.headless:
        return run_headless(parse_values(args.values), args.algorithm, settings.step_delay)

    from .visualizer import run_window
    controller = SortController(settings.step_delay_ms)
    controller.submit(args.values)
    controller.select(args.algorithm)
    run_window(settings, controller, msg="; ".join(errors))
    return 0


if __name__ == "__main__":
    sys.exit(main())
