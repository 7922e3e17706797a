# ============================================================
# SortStepper - Custom Sorter Template
# ============================================================
#
# Rules:
#   1. Define a function called  sort(buf)
#   2. It must be a generator that yields right after every mutation,
#      either ("swap" | "write", [touched indices]) or just [touched indices].
#      Do not yield for plain comparisons: one yield is one animation frame.
#   3. Mutate `buf` in-place - do NOT return a new list, and only ever
#      move values around (swap) so every frame is a permutation of the input.
#   4. Optionally set NAME and DESCRIPTION (shown in the window)
#
# Load this file with:  sortstepper --load-sorter example_custom_sorter.py
# ============================================================

NAME = "Stooge Sort"
DESCRIPTION = ("Stooge Sort: Sorts the first two thirds, then the last two thirds, "
               "then the first two thirds again.")


def sort(buf):
    """Stooge Sort - O(n^2.7) - famously terrible, famously entertaining."""

    def stooge(lo, hi):
        if buf[lo] > buf[hi]:
            buf[lo], buf[hi] = buf[hi], buf[lo]
            yield "swap", [lo, hi]

        if hi - lo + 1 > 2:
            t = (hi - lo + 1) // 3
            yield from stooge(lo, hi - t)
            yield from stooge(lo + t, hi)
            yield from stooge(lo, hi - t)

    if buf:
        yield from stooge(0, len(buf) - 1)
