"""Logging helpers for rate limiting and one-shot warnings."""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, Optional, Tuple


class RateLimitedLogger:
    """Wrapper that rate-limits log messages by an arbitrary key.

    Used for provider failures: a dead upstream would otherwise log one line
    per query.
    """

    def __init__(
        self,
        logger: logging.Logger,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._logger = logger
        self._window = float(max(window_seconds, 0))
        self._clock = clock
        self._last_logged: Dict[Tuple[Any, ...], float] = {}
        self._suppressed: Dict[Tuple[Any, ...], int] = {}
        self._lock = threading.Lock()

    def _should_emit(self, key: Tuple[Any, ...]) -> Tuple[bool, int]:
        now = self._clock()
        with self._lock:
            last = self._last_logged.get(key)
            if last is not None and (now - last) < self._window:
                self._suppressed[key] = self._suppressed.get(key, 0) + 1
                return False, 0
            self._last_logged[key] = now
            return True, self._suppressed.pop(key, 0)

    def log(self, level: int, key: Iterable[Any], msg: str, *args: Any, **kwargs: Any) -> bool:
        emit, suppressed = self._should_emit(tuple(key))
        if not emit:
            return False
        if suppressed:
            msg = f"{msg} (+{suppressed} similar suppressed)"
        self._logger.log(level, msg, *args, **kwargs)
        return True

    def info(self, key: Iterable[Any], msg: str, *args: Any, **kwargs: Any) -> bool:
        return self.log(logging.INFO, key, msg, *args, **kwargs)

    def warning(self, key: Iterable[Any], msg: str, *args: Any, **kwargs: Any) -> bool:
        return self.log(logging.WARNING, key, msg, *args, **kwargs)

    def error(self, key: Iterable[Any], msg: str, *args: Any, **kwargs: Any) -> bool:
        return self.log(logging.ERROR, key, msg, *args, **kwargs)


_warn_once_lock = threading.Lock()
_warned_keys: Dict[Any, bool] = {}


def warn_once(key: Any, msg: str, *, logger: Optional[logging.Logger] = None) -> bool:
    """Emit a warning once per key."""

    with _warn_once_lock:
        if key in _warned_keys:
            return False
        _warned_keys[key] = True

    target_logger = logger or logging.getLogger(__name__)
    target_logger.warning(msg)
    return True


def reset_warn_once_cache() -> None:
    """Test helper to clear the warn-once registry."""

    with _warn_once_lock:
        _warned_keys.clear()
