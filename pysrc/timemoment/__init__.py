from __future__ import annotations

from ._pymoment import *
from ._pymoment import (  # for the docs
    __all__,
    __version__,
    _patch_time_frozen,
    _patch_time_keep_ticking,
    _unpatch_time,
    _unpkl_moment,
)

from contextlib import contextmanager as _contextmanager
from dataclasses import dataclass as _dataclass
from typing import Iterator as _Iterator


@_dataclass
class _TimePatch:
    _pin: Moment
    _keep_ticking: bool

    def shift(self, **kwargs: int) -> None:
        """Move the patched time, using the keywords of :meth:`Moment.add`"""
        if self._keep_ticking:
            elapsed = Moment.now_utc().epoch_nanos() - self._pin.epoch_nanos()
            self._pin = new = self._pin.plus_unit(Unit.NANOS, elapsed).add(
                **kwargs
            )
            _patch_time_keep_ticking(new.epoch_nanos())
        else:
            self._pin = new = self._pin.add(**kwargs)
            _patch_time_frozen(new.epoch_nanos())


@_contextmanager
def patch_current_time(
    moment: Moment, /, *, keep_ticking: bool
) -> _Iterator[_TimePatch]:
    """Patch the current time to a fixed value (for testing purposes).
    Behaves as a context manager or decorator, with similar semantics to
    ``unittest.mock.patch``.

    Important
    ---------

    * This function should be used only for testing purposes. It is not
      thread-safe or part of the stable API.
    * This function only affects :meth:`Moment.now` and :meth:`Moment.now_utc`.
      It does not affect the standard library's time functions or any other
      libraries. Use the ``time_machine`` package if you also want to patch
      other libraries.
    * It doesn't affect the system's UTC offset, which ``Moment.now()``
      still reads from the operating system.

    Example
    -------

    >>> from timemoment import Moment, patch_current_time
    >>> m = Moment(1980, 3, 2, 2)
    >>> with patch_current_time(m, keep_ticking=False) as p:
    ...     assert Moment.now_utc() == m
    ...     p.shift(hours=4)
    ...     assert Moment.now_utc() == m.add(hours=4)
    ...
    >>> assert Moment.now_utc() != m
    """
    if keep_ticking:
        _patch_time_keep_ticking(moment.epoch_nanos())
    else:
        _patch_time_frozen(moment.epoch_nanos())

    try:
        yield _TimePatch(moment, keep_ticking)
    finally:
        _unpatch_time()
