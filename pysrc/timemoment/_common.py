from datetime import timedelta as _timedelta, timezone as _timezone
from functools import lru_cache

UTC = _timezone.utc
Nanos = int  # 0-999_999_999
Minutes = int  # -1440-1440


# We cache fixed-offset tzinfo objects to avoid creating multiple identical ones.
# It's very common to only have whole-hour offsets, so this helps a lot.
@lru_cache
def mk_fixed_tzinfo(minutes: Minutes, /) -> _timezone:
    if minutes == 0:
        return UTC
    return _timezone(_timedelta(minutes=minutes))
