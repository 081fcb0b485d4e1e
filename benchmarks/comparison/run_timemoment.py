# Run with: python benchmarks/comparison/run_timemoment.py -o timemoment.json
import pyperf

runner = pyperf.Runner()

runner.timeit(
    "various operations",
    "m = Moment.from_epoch(1_586_138_640, offset=-240).at_utc();"
    "m < Moment.now_utc();"
    "m.add(hours=4, minutes=30)"
    ".with_offset_same_instant(120)",
    setup="from timemoment import Moment",
)

runner.timeit(
    "new moment",
    "Moment(2020, 2, 29, 12, 30)",
    setup="from timemoment import Moment",
)

runner.timeit(
    "moment add",
    "m.add(years=-4, months=59, weeks=-7, days=3)",
    setup="from timemoment import Moment; m = Moment(1987, 3, 31)",
)

runner.timeit(
    "iso week",
    "m.week_year, m.week",
    setup="from timemoment import Moment; m = Moment(2020, 12, 31)",
)

runner.timeit(
    "change offset",
    "m.with_offset_same_instant(-300)",
    setup="from timemoment import Moment; m = Moment(2020, 3, 20, 12, 30, 45, offset=60)",
)
