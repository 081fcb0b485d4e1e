from hypothesis.strategies import composite, integers

from timemoment import (
    MAX_EPOCH_SEC,
    MAX_OFFSET,
    MIN_EPOCH_SEC,
    MIN_OFFSET,
    SECS_PER_DAY,
    Moment,
)


class AlwaysEqual:
    def __eq__(self, _):
        return True


class NeverEqual:
    def __eq__(self, _):
        return False


class AlwaysLarger:
    def __lt__(self, _):
        return False

    def __le__(self, _):
        return False

    def __gt__(self, _):
        return True

    def __ge__(self, _):
        return True


class AlwaysSmaller:
    def __lt__(self, _):
        return True

    def __le__(self, _):
        return True

    def __gt__(self, _):
        return False

    def __ge__(self, _):
        return False


@composite
def moments(draw) -> Moment:
    """Any moment, at any offset. Keeps a day of margin at both ends
    of the range, so the local wall time is always valid too."""
    nanos = draw(integers(0, 999_999_999))
    return Moment.from_epoch(
        draw(
            integers(MIN_EPOCH_SEC + SECS_PER_DAY, MAX_EPOCH_SEC - SECS_PER_DAY)
        ),
        nanosecond=nanos,
        offset=draw(integers(MIN_OFFSET, MAX_OFFSET)),
    )
