# Run with: python benchmarks/comparison/run_stdlib.py -o stdlib.json
# then compare with: python -m pyperf compare_to stdlib.json timemoment.json
import pyperf

runner = pyperf.Runner()

runner.timeit(
    "various operations",
    "d = datetime.fromtimestamp(1_586_138_640, timezone(timedelta(hours=-4)))"
    ".astimezone(timezone.utc);"
    "d < datetime.now(timezone.utc);"
    "(d + timedelta(hours=4, minutes=30))"
    ".astimezone(timezone(timedelta(hours=2)))",
    setup="from datetime import datetime, timedelta, timezone",
)

runner.timeit(
    "new moment",
    "datetime(2020, 2, 29, 12, 30, tzinfo=timezone.utc)",
    setup="from datetime import datetime, timezone",
)

runner.timeit(
    "iso week",
    "d.isocalendar()[:2]",
    setup="from datetime import datetime; d = datetime(2020, 12, 31)",
)

runner.timeit(
    "change offset",
    "d.astimezone(tz)",
    setup="from datetime import datetime, timedelta, timezone; "
    "d = datetime(2020, 3, 20, 12, 30, 45, tzinfo=timezone(timedelta(hours=1))); "
    "tz = timezone(timedelta(hours=-5))",
)
