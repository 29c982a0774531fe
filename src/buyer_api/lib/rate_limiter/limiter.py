"""In-memory fixed-window rate limiting.

Time is cut into epoch-aligned buckets of ``window_ms``; each
``(limiter, identity, bucket)`` key holds a counter. All counter access goes
through one lock owned by :class:`RateLimitStore`, so concurrent checks for
the same key never admit more than ``max_requests``.
"""

import asyncio
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from loguru import logger


@dataclass(frozen=True)
class RateLimitConfig:
    """Window length, allowance, and rejection message for one operation class."""

    window_ms: int
    max_requests: int
    message: str = "Too many requests. Please try again later."

    def __post_init__(self) -> None:
        if self.window_ms <= 0 or self.max_requests <= 0:
            msg = "window_ms and max_requests must be positive"
            raise ValueError(msg)


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a check or status query."""

    allowed: bool
    remaining: int
    reset_time_ms: int
    message: str | None = None

    @property
    def reset_at(self) -> datetime:
        return datetime.fromtimestamp(self.reset_time_ms / 1000, tz=UTC)

    def retry_after_seconds(self, now_ms: int) -> int:
        """Whole seconds until the window resets (never negative)."""
        return max(0, -(-(self.reset_time_ms - now_ms) // 1000))


BUYER_CREATE = RateLimitConfig(
    window_ms=60 * 60 * 1000,
    max_requests=10,
    message="Too many buyer creation requests. Please try again later.",
)
BUYER_UPDATE = RateLimitConfig(
    window_ms=60 * 60 * 1000,
    max_requests=50,
    message="Too many buyer update requests. Please try again later.",
)


@dataclass
class _Bucket:
    count: int
    reset_time_ms: int


BucketKey = tuple[str, str, int]


class RateLimitStore:
    """Counter map shared by every limiter of one application instance."""

    def __init__(self) -> None:
        self._buckets: dict[BucketKey, _Bucket] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def consume(self, key: BucketKey, amount: int, max_requests: int, reset_time_ms: int) -> tuple[bool, int]:
        """Atomically add ``amount`` to a bucket unless that would exceed ``max_requests``.

        Returns:
            Tuple of (allowed, count). ``count`` is the new count when allowed,
            the unchanged current count when rejected.
        """
        with self._lock:
            bucket = self._buckets.get(key)
            current = bucket.count if bucket else 0
            new_count = current + amount
            if new_count > max_requests:
                return False, current
            self._buckets[key] = _Bucket(new_count, reset_time_ms)
            return True, new_count

    def count(self, key: BucketKey) -> int:
        with self._lock:
            bucket = self._buckets.get(key)
            return bucket.count if bucket else 0

    def clear(self, key: BucketKey) -> None:
        with self._lock:
            self._buckets.pop(key, None)

    def purge_expired(self, now_ms: int | None = None) -> int:
        """Drop buckets whose window has ended.

        Returns:
            Number of buckets removed.
        """
        now = _now_ms() if now_ms is None else now_ms
        with self._lock:
            expired = [key for key, bucket in self._buckets.items() if now > bucket.reset_time_ms]
            for key in expired:
                del self._buckets[key]
        return len(expired)


def _now_ms() -> int:
    return int(time.time() * 1000)


class RateLimiter:
    """Fixed-window limiter for one operation class.

    Args:
        name: Namespace for this limiter's counters within the store.
        config: Window and allowance.
        store: Shared counter store. A private store is created when omitted.
        clock: Returns the current time in epoch milliseconds.
    """

    def __init__(
        self,
        name: str,
        config: RateLimitConfig,
        store: RateLimitStore | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.name = name
        self.config = config
        self.store = store if store is not None else RateLimitStore()
        self._clock = clock or _now_ms

    @property
    def limit(self) -> int:
        return self.config.max_requests

    def now_ms(self) -> int:
        return self._clock()

    def _window(self, identifier: str) -> tuple[BucketKey, int]:
        window_start = (self._clock() // self.config.window_ms) * self.config.window_ms
        return (self.name, identifier, window_start), window_start + self.config.window_ms

    def check_limit(self, identifier: str, request_count: int = 1) -> RateLimitResult:
        """Consume ``request_count`` units for ``identifier`` in the current window."""
        if request_count < 1:
            msg = "request_count must be at least 1"
            raise ValueError(msg)

        key, reset_time = self._window(identifier)
        allowed, count = self.store.consume(key, request_count, self.config.max_requests, reset_time)

        if not allowed:
            logger.warning(f"Rate limit '{self.name}' exceeded for {identifier} (count={count})")
            return RateLimitResult(
                allowed=False,
                remaining=max(0, self.config.max_requests - count),
                reset_time_ms=reset_time,
                message=self.config.message,
            )

        return RateLimitResult(
            allowed=True,
            remaining=self.config.max_requests - count,
            reset_time_ms=reset_time,
        )

    def get_status(self, identifier: str) -> RateLimitResult:
        """Report the current window's allowance without consuming it."""
        key, reset_time = self._window(identifier)
        count = self.store.count(key)
        return RateLimitResult(
            allowed=count < self.config.max_requests,
            remaining=max(0, self.config.max_requests - count),
            reset_time_ms=reset_time,
        )

    def reset(self, identifier: str) -> None:
        """Clear the current window's counter for ``identifier``."""
        key, _ = self._window(identifier)
        self.store.clear(key)


@dataclass(frozen=True)
class RateLimiters:
    """The limiters guarding buyer write endpoints, sharing one store."""

    store: RateLimitStore
    create: RateLimiter
    update: RateLimiter

    def get(self, kind: str) -> RateLimiter:
        if kind == "create":
            return self.create
        if kind == "update":
            return self.update
        msg = f"Unknown rate limit class: {kind}"
        raise KeyError(msg)


def build_rate_limiters(
    create: RateLimitConfig = BUYER_CREATE,
    update: RateLimitConfig = BUYER_UPDATE,
    clock: Callable[[], int] | None = None,
) -> RateLimiters:
    """Construct the create/update limiters over a fresh shared store."""
    store = RateLimitStore()
    return RateLimiters(
        store=store,
        create=RateLimiter("create", create, store, clock),
        update=RateLimiter("update", update, store, clock),
    )


async def sweep_expired_buckets(store: RateLimitStore, interval_seconds: float) -> None:
    """Purge expired buckets every ``interval_seconds`` until cancelled.

    The purge runs in a worker thread so the event loop never waits on the
    store lock.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            purged = await asyncio.to_thread(store.purge_expired)
        except Exception:
            logger.exception("Rate limit sweep failed")
            continue
        if purged:
            logger.debug(f"Purged {purged} expired rate limit buckets; {len(store)} live")
