"""
Stress test for sharing moments between threads.

Moments are immutable, so threads only ever read the shared values.
The results are checked against a single-threaded run.
"""

import sys
import time
from threading import Thread

from timemoment import Component, Moment, Unit
from timemoment.adjusters import last_day_of_week_in_month

if not hasattr(sys, "_is_gil_enabled") or sys._is_gil_enabled():
    # Running with GIL enabled can still be useful to compare performance,
    # but be sure to warn that threading hasn't been stress tested.
    print("WARNING: Running with GIL enabled. Threading not stress tested.")


NUM_THREADS = 16
NUM_ITERATIONS = 2_000
OFFSET_SAMPLE = [0, 60, -300, 330, 345, -570, 1440, -1440, 525, -210, 780]
assert (
    len(OFFSET_SAMPLE) % NUM_THREADS
), "Offset sample should not be evenly divisible by number of threads"
OFFSETS = OFFSET_SAMPLE * (NUM_THREADS * NUM_ITERATIONS // 8)
SHARED = Moment(2024, 6, 15, 12, nanosecond=123_456_789, offset=120)
LAST_SUNDAY = last_day_of_week_in_month(7)


def work(offsets, results):
    """Derive new moments from the shared one"""
    total = 0
    for offset in offsets:
        m = (
            SHARED.with_offset_same_instant(offset)
            .plus_unit(Unit.MONTHS, offset // 60)
            .with_component(Component.DAY_OF_WEEK, 1)
            .adjust(LAST_SUNDAY)
        )
        total += m.epoch + m.day_of_year
    results.append(total)


def main(func):
    print(f"Starting test: {func.__name__}")
    threads = []
    results = []

    start_time = time.time()

    for n in range(NUM_THREADS):
        thread = Thread(target=func, args=(OFFSETS[n::NUM_THREADS], results))
        threads.append(thread)
        thread.start()

    for thread in threads:
        thread.join()

    end_time = time.time()
    print(f"Execution time: {end_time - start_time:.2f} seconds")

    expect = []
    for n in range(NUM_THREADS):
        func(OFFSETS[n::NUM_THREADS], expect)
    assert sorted(results) == sorted(expect), "results differ between runs"


if __name__ == "__main__":
    main(work)
