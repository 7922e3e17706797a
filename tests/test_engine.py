import random
from collections import Counter
from functools import total_ordering

import pytest

from sortstepper.algorithms import Algorithm, UnknownAlgorithmError, register, unregister
from sortstepper.engine import (
    CancelToken, InvalidStepError, RunState, RunStateError, StepEvent, _normalize, paced, run,
)

ALL = list(Algorithm)


@total_ordering
class Tagged:
    """Value that compares by ``value`` only, so equal values stay distinguishable."""

    def __init__(self, value, tag=""):
        self.value, self.tag = value, tag

    def __eq__(self, other):
        return self.value == other.value

    def __lt__(self, other):
        return self.value < other.value

    def __hash__(self):
        return hash(self.value)

    def __repr__(self):
        return f"{self.value}{self.tag}"


def random_sequences():
    rng = random.Random(1234)
    seqs = [[], [1], [2, 1], [1, 2, 3, 4], [4, 3, 2, 1], [0, 0, 0], [-1, -5, 3, 3, 0]]
    for n in (5, 8, 13, 21):
        seqs.append([rng.randint(-10, 10) for _ in range(n)])
        seqs.append([round(rng.uniform(-5, 5), 2) for _ in range(n)])
    return seqs


def changed(a, b):
    return {i for i, (x, y) in enumerate(zip(a, b)) if x != y}


@pytest.mark.parametrize("algorithm", ALL)
def test_completed_run_is_sorted_permutation(algorithm):
    for values in random_sequences():
        sort_run = run(values, algorithm)
        events = list(sort_run)
        assert sort_run.state is RunState.COMPLETED
        assert list(sort_run.values) == sorted(values)
        for ev in events:
            assert Counter(ev.values) == Counter(values)
        if events:
            assert list(events[-1].values) == sorted(values)


@pytest.mark.parametrize("algorithm", ALL)
def test_each_step_is_one_local_mutation(algorithm):
    values = [9, -2, 7, 7, 0, 3, -2, 5, 1]
    prev = tuple(values)
    for n, ev in enumerate(run(values, algorithm)):
        assert ev.index == n
        diff = changed(prev, ev.values)
        if ev.kind == "merge":
            assert diff <= set(range(min(ev.indices), max(ev.indices) + 1))
        else:
            assert diff <= set(ev.indices)
            assert len(ev.indices) <= 2
        prev = ev.values


@pytest.mark.parametrize("algorithm", ALL)
def test_empty_input_completes_without_steps(algorithm):
    sort_run = run([], algorithm)
    assert sort_run.state is RunState.IDLE
    assert list(sort_run) == []
    assert sort_run.state is RunState.COMPLETED
    assert sort_run.steps == 0


@pytest.mark.parametrize("algorithm", ALL)
def test_sorted_input_comes_back_unchanged(algorithm):
    values = [1, 2, 2, 5, 9]
    sort_run = run(values, algorithm)
    for ev in sort_run:
        assert list(ev.values) == values
    assert sort_run.state is RunState.COMPLETED


def test_bubble_scenario():
    sort_run = run([5, 3, 1], Algorithm.BUBBLE)
    snapshots = [list(ev.values) for ev in sort_run]
    assert snapshots == [[3, 5, 1], [3, 1, 5], [1, 3, 5]]
    assert sort_run.state is RunState.COMPLETED
    assert sort_run.values == (1, 3, 5)


def test_quick_scenario():
    sort_run = run([4, 2, 2, 3], "quick")
    snapshots = [list(ev.values) for ev in sort_run]
    assert snapshots[2] == [2, 2, 3, 4]
    assert snapshots[-1] == [2, 2, 3, 4]
    assert sort_run.steps == 4
    assert sort_run.last.kind == "swap"


def test_merge_is_stable():
    a, one, b = Tagged(3, "a"), Tagged(1), Tagged(3, "b")
    sort_run = run([a, one, b], Algorithm.MERGE)
    list(sort_run)
    final = sort_run.values
    assert [x.value for x in final] == [1, 3, 3]
    assert final[1] is a and final[2] is b


@pytest.mark.parametrize("algorithm", ALL)
def test_cancel_after_k_steps(algorithm):
    values = [8, 6, 7, 5, 3, 0, 9]
    total = len(list(run(values, algorithm)))
    for k in range(total):
        token = CancelToken()
        sort_run = run(values, algorithm, token)
        events = iter(sort_run)
        seen = [next(events) for _ in range(k)]
        token.cancel()
        assert list(events) == []
        assert sort_run.state is RunState.CANCELLED
        assert sort_run.steps == k
        expected = seen[-1].values if seen else tuple(values)
        assert sort_run.values == expected


def test_cancel_before_start_emits_nothing():
    token = CancelToken()
    token.cancel()
    sort_run = run([3, 2, 1], "bubble", token)
    assert list(sort_run) == []
    assert sort_run.state is RunState.CANCELLED


def test_closing_iterator_cancels_run():
    sort_run = run([3, 2, 1], "selection")
    events = iter(sort_run)
    next(events)
    events.close()
    assert sort_run.state is RunState.CANCELLED
    assert sort_run.steps == 1


def test_run_cannot_be_restarted():
    sort_run = run([2, 1], "insertion")
    list(sort_run)
    with pytest.raises(RunStateError):
        iter(sort_run)


def test_input_is_not_mutated():
    values = [3, 1, 2]
    list(run(values, "merge"))
    assert values == [3, 1, 2]


def test_snapshots_are_immutable():
    ev = next(iter(run([2, 1], "bubble")))
    assert isinstance(ev.values, tuple)
    with pytest.raises(AttributeError):
        ev.values = (0,)


def test_unknown_algorithm():
    with pytest.raises(UnknownAlgorithmError):
        run([1], "bogo")


def test_paced_sleeps_between_steps():
    naps = []
    events = [StepEvent(0, (1,)), StepEvent(1, (1,))]
    assert list(paced(events, 0.1, naps.append)) == events
    assert naps == [0.1, 0.1]


def test_paced_without_delay_never_sleeps():
    naps = []
    list(paced(run([3, 2, 1], "bubble"), 0, naps.append))
    assert naps == []


def test_cancel_after_final_step_keeps_sorted_values():
    token = CancelToken()
    sort_run = run([2, 1], "bubble", token)
    events = iter(sort_run)
    assert next(events).values == (1, 2)
    token.cancel()
    assert list(events) == []
    assert sort_run.state is RunState.CANCELLED
    assert sort_run.values == (1, 2)


def test_failing_strategy_ends_in_failed_state():
    def explode(buf):
        buf[0], buf[1] = buf[1], buf[0]
        yield "swap", (0, 1)
        raise ZeroDivisionError("boom")

    register("custom_explode", "Explode", explode)
    try:
        sort_run = run([2, 1], "custom_explode")
        events = iter(sort_run)
        assert next(events).values == (1, 2)
        with pytest.raises(ZeroDivisionError):
            next(events)
        assert sort_run.state is RunState.FAILED
        assert sort_run.finished
        assert sort_run.values == (1, 2)
    finally:
        unregister("custom_explode")


@pytest.mark.parametrize("step, expected", [
    (("swap", [0, 1]), ("swap", (0, 1))),
    ([3, 4], ("write", (3, 4))),
    ((2,), ("write", (2,))),
    (None, ("write", ())),
])
def test_normalize_accepted_shapes(step, expected):
    assert _normalize(step, [0, 0, 0, 0, 0]) == expected


def test_normalize_buffer_and_indices():
    buf = [1, 2]
    assert _normalize((buf, [0, 1]), buf) == ("write", (0, 1))


@pytest.mark.parametrize("step", [5, ([1, 2], [0, 1]), ("swap", "ab"), [True, 0]])
def test_normalize_rejects_other_shapes(step):
    with pytest.raises(InvalidStepError):
        _normalize(step, [9, 9])
