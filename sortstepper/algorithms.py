"""
Sorting strategies.

Every strategy is a generator function ``strategy(buf)`` that sorts ``buf`` in
place and yields ``(kind, indices)`` right after each atomic mutation:

    kind     "swap", "write" or "merge"
    indices  tuple of positions touched by that mutation (for highlighting)

A strategy never yields for a plain comparison, so one yield is one mutation.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)

SWAP  = "swap"
WRITE = "write"
MERGE = "merge"


class Algorithm(str, Enum):
    BUBBLE    = "bubble"
    SELECTION = "selection"
    INSERTION = "insertion"
    MERGE     = "merge"
    QUICK     = "quick"


class UnknownAlgorithmError(KeyError):
    pass

# ============================================================
# ===================== SORTING ALGORITHMS ===================
# ============================================================

def bubble_sort(buf):
    n = len(buf)
    for i in range(n):
        for j in range(n - i - 1):
            if buf[j] > buf[j+1]:
                buf[j], buf[j+1] = buf[j+1], buf[j]
                yield SWAP, (j, j+1)


def selection_sort(buf):
    n = len(buf)
    for i in range(n):
        mi = i
        for j in range(i+1, n):
            if buf[j] < buf[mi]: mi = j
        # swapped even when i is already the minimum
        buf[i], buf[mi] = buf[mi], buf[i]
        yield SWAP, (i, mi)


def insertion_sort(buf):
    for i in range(1, len(buf)):
        key = buf[i]; j = i - 1
        while j >= 0 and buf[j] > key:
            # the vacated slot holds the key so every snapshot stays a permutation
            buf[j+1] = buf[j]; buf[j] = key
            yield WRITE, (j+1, j)
            j -= 1
        buf[j+1] = key
        yield WRITE, (j+1,)


def _merge(buf, lo, mid, hi):
    """
    Merge the sorted runs ``buf[lo:mid]`` and ``buf[mid:hi]``.

    While merging, ``buf[k:j]`` is the unmerged tail of the left run and
    ``buf[j:hi]`` the unmerged tail of the right run. Taking the right head
    rotates it down to ``k``; taking the left head leaves it where it is.
    Each output position ``k`` is one merge-write step.
    """
    j = mid
    for k in range(lo, hi):
        if k < j < hi and buf[j] < buf[k]:
            src = j
            buf[k:j+1] = [buf[j]] + buf[k:j]
            j += 1
            yield MERGE, (k, src)
        else:
            yield MERGE, (k,)


def _merge_sort(buf, lo, hi):
    if hi - lo <= 1:
        return
    # floor midpoint of the inclusive range [lo, hi-1]; left half gets the extra element
    mid = (lo + hi - 1) // 2 + 1
    yield from _merge_sort(buf, lo, mid)
    yield from _merge_sort(buf, mid, hi)
    yield from _merge(buf, lo, mid, hi)


def merge_sort(buf):
    yield from _merge_sort(buf, 0, len(buf))


def _partition(buf, lo, hi):
    """Lomuto partition of ``buf[lo:hi+1]`` around ``buf[hi]``; returns the pivot's final index."""
    pivot = buf[hi]; i = lo - 1
    for j in range(lo, hi):
        if buf[j] < pivot:
            i += 1
            buf[i], buf[j] = buf[j], buf[i]
            yield SWAP, (i, j)
    buf[i+1], buf[hi] = buf[hi], buf[i+1]
    yield SWAP, (i+1, hi)
    return i + 1


def quick_sort(buf):
    ranges = [(0, len(buf) - 1)]
    while ranges:
        lo, hi = ranges.pop()
        if lo >= hi:
            continue
        p = yield from _partition(buf, lo, hi)
        # right pushed first so the left subrange is sorted first
        ranges.append((p+1, hi))
        ranges.append((lo, p-1))

# ============================================================
# ========================= REGISTRY =========================
# ============================================================

ALGORITHMS = [
    ("Bubble Sort",    Algorithm.BUBBLE.value),
    ("Selection Sort", Algorithm.SELECTION.value),
    ("Insertion Sort", Algorithm.INSERTION.value),
    ("Merge Sort",     Algorithm.MERGE.value),
    ("Quick Sort",     Algorithm.QUICK.value),
]

DESCRIPTIONS = {
    "bubble":    "Bubble Sort: Repeatedly steps through the list, compares adjacent items "
                 "and swaps them if they are in the wrong order.",
    "selection": "Selection Sort: Finds the minimum element and puts it at the beginning, "
                 "repeating for each index.",
    "insertion": "Insertion Sort: Builds the sorted array one item at a time by comparing "
                 "and inserting elements.",
    "merge":     "Merge Sort: Divides the array into halves, sorts them recursively, "
                 "and merges the sorted halves.",
    "quick":     "Quick Sort: Selects a pivot and partitions the array around the pivot, "
                 "recursively sorting the subarrays.",
}

_strategies = {
    "bubble":    bubble_sort,
    "selection": selection_sort,
    "insertion": insertion_sort,
    "merge":     merge_sort,
    "quick":     quick_sort,
}


def _key(algorithm) -> str:
    return algorithm.value if isinstance(algorithm, Algorithm) else str(algorithm)


def get_strategy(algorithm):
    key = _key(algorithm)
    if key not in _strategies:
        raise UnknownAlgorithmError(f"Unknown algorithm: {key}")
    return _strategies[key]


def display_name(algorithm) -> str:
    key = _key(algorithm)
    for name, k in ALGORITHMS:
        if k == key: return name
    return key


def description(algorithm) -> str:
    return DESCRIPTIONS.get(_key(algorithm), "")


def register(key, name, fn, description=""):
    """Add a strategy under ``key``; an existing key is replaced."""
    _strategies[key] = fn
    DESCRIPTIONS[key] = description or name
    if not any(k == key for _, k in ALGORITHMS):
        ALGORITHMS.append((name, key))
    logger.debug("registered strategy %s (%s)", key, name)


def unregister(key):
    if key in {a.value for a in Algorithm}:
        raise ValueError(f"Built-in algorithm cannot be removed: {key}")
    _strategies.pop(key, None)
    DESCRIPTIONS.pop(key, None)
    ALGORITHMS[:] = [(n, k) for n, k in ALGORITHMS if k != key]


def keys():
    return [k for _, k in ALGORITHMS]
