"""Named timers that accumulate elapsed-time statistics."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import ClassVar

Key = "str | int"


def seconds_to_time_string(seconds: float) -> str:
    """Format seconds as zero-padded fixed-point text."""
    return "%09.6f" % seconds


@dataclass
class _Accumulator:
    count: int = 0
    total: float = 0.0
    mean: float = 0.0
    m2: float = 0.0
    minimum: float = math.inf
    maximum: float = -math.inf

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        delta = value - self.mean
        self.mean += delta / self.count
        self.m2 += delta * (value - self.mean)
        self.minimum = min(self.minimum, value)
        self.maximum = max(self.maximum, value)

    @property
    def variance(self) -> float:
        return self.m2 / self.count if self.count else 0.0


class Timing:
    """A registry of tagged timers and their statistics."""

    _instance: ClassVar[Timing | None] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tags: dict[str, int] = {}
        self._timers: list[_Accumulator] = []
        self._max_tag_length = 0

    @classmethod
    def instance(cls) -> Timing:
        """The process-wide registry used by timers by default."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def get_handle(self, tag: str) -> int:
        with self._lock:
            handle = self._tags.get(tag)
            if handle is None:
                handle = len(self._timers)
                self._tags[tag] = handle
                self._timers.append(_Accumulator())
                self._max_tag_length = max(self._max_tag_length, len(tag))
            return handle

    def get_tag(self, handle: int) -> str:
        with self._lock:
            return next((tag for tag, h in self._tags.items() if h == handle), "")

    def _stats(self, key: str | int) -> _Accumulator:
        with self._lock:
            handle = self.get_handle(key) if isinstance(key, str) else key
            return self._timers[handle]

    def add_time(self, handle: int, seconds: float) -> None:
        with self._lock:
            self._timers[handle].add(seconds)

    def total_seconds(self, key: str | int) -> float:
        with self._lock:
            return self._stats(key).total

    def mean_seconds(self, key: str | int) -> float:
        with self._lock:
            return self._stats(key).mean

    def num_samples(self, key: str | int) -> int:
        with self._lock:
            return self._stats(key).count

    def variance_seconds(self, key: str | int) -> float:
        with self._lock:
            return self._stats(key).variance

    def min_seconds(self, key: str | int) -> float:
        with self._lock:
            return self._stats(key).minimum

    def max_seconds(self, key: str | int) -> float:
        with self._lock:
            return self._stats(key).maximum

    def report(self) -> str:
        """A table of all tags, sorted by tag; empty when nothing is registered."""
        with self._lock:
            if not self._tags:
                return ""
            lines = ["SM Timing", "-----------"]
            for tag in sorted(self._tags):
                stats = self._timers[self._tags[tag]]
                line = f"{tag:<{self._max_tag_length}}\t{stats.count:>7}\t"
                if stats.count > 0:
                    line += (
                        f"{seconds_to_time_string(stats.total)}\t"
                        f"({seconds_to_time_string(stats.mean)} +- "
                        f"{seconds_to_time_string(math.sqrt(stats.variance))})\t"
                        f"[{seconds_to_time_string(stats.minimum)},"
                        f"{seconds_to_time_string(stats.maximum)}]"
                    )
                lines.append(line)
            return "\n".join(lines) + "\n"

    def reset(self) -> None:
        """Forget all tags; later lookups by tag get fresh handles."""
        with self._lock:
            self._tags.clear()


class Timer:
    """Measures elapsed time into a :class:`Timing` registry.

    Usable as a context manager; a running timer is stopped on exit.
    """

    def __init__(
        self,
        key: str | int,
        construct_stopped: bool = False,
        timing: Timing | None = None,
    ) -> None:
        self._timing = timing if timing is not None else Timing.instance()
        self._handle = self._timing.get_handle(key) if isinstance(key, str) else key
        self._start: float | None = None
        self.is_timing = False
        if not construct_stopped:
            self.start()

    def start(self) -> None:
        self.is_timing = True
        self._start = time.perf_counter()

    def stop(self) -> None:
        if self._start is None:
            raise RuntimeError("timer was never started")
        elapsed = time.perf_counter() - self._start
        self._timing.add_time(self._handle, elapsed)
        self.is_timing = False

    def __enter__(self) -> Timer:
        if not self.is_timing:
            self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self.is_timing:
            self.stop()