"""Unit tests for the sliding-window rate limiter."""

import threading
from concurrent.futures import ThreadPoolExecutor

from geoproxy.utils import DAY_SECONDS, Admission, SlidingWindowRateLimiter

HOUR = 60 * 60
T0 = 1_700_000_000.0


class TestTryAdmit:
    """Tests for admission and window pruning."""

    def setup_method(self) -> None:
        self.limiter = SlidingWindowRateLimiter()

    def admit(self, now: float, key: str = "10.0.0.1", max_count: int = 2) -> Admission:
        return self.limiter.try_admit(key, now, window_seconds=DAY_SECONDS, max_count=max_count)

    def test_admits_up_to_quota(self) -> None:
        assert self.admit(T0) is Admission.ADMITTED
        assert self.admit(T0 + HOUR) is Admission.ADMITTED
        assert self.admit(T0 + 2 * HOUR) is Admission.DENIED

    def test_denied_attempt_is_not_recorded(self) -> None:
        self.admit(T0)
        self.admit(T0 + HOUR)
        self.admit(T0 + 2 * HOUR)
        assert self.limiter.recorded("10.0.0.1") == [T0, T0 + HOUR]

    def test_quota_frees_by_exactly_one_when_oldest_expires(self) -> None:
        self.admit(T0)
        self.admit(T0 + HOUR)
        # Oldest hit is exactly 24h old: no longer inside the window
        assert self.admit(T0 + DAY_SECONDS) is Admission.ADMITTED
        assert self.admit(T0 + DAY_SECONDS + 1) is Admission.DENIED

    def test_still_denied_just_before_expiry(self) -> None:
        self.admit(T0)
        self.admit(T0 + HOUR)
        assert self.admit(T0 + DAY_SECONDS - 1) is Admission.DENIED

    def test_denied_attempt_still_prunes(self) -> None:
        self.admit(T0)
        self.admit(T0 + 20 * HOUR)
        self.admit(T0 + 21 * HOUR)  # denied
        assert self.admit(T0 + 25 * HOUR, max_count=1) is Admission.DENIED
        assert self.limiter.recorded("10.0.0.1") == [T0 + 20 * HOUR]

    def test_keys_are_independent(self) -> None:
        self.admit(T0, key="a")
        self.admit(T0, key="a")
        assert self.admit(T0, key="a") is Admission.DENIED
        assert self.admit(T0, key="b") is Admission.ADMITTED

    def test_zero_quota_denies_everything(self) -> None:
        assert self.admit(T0, max_count=0) is Admission.DENIED
        assert self.limiter.recorded("10.0.0.1") == []

    def test_out_of_order_timestamps_are_pruned(self) -> None:
        self.admit(T0 + HOUR, max_count=5)
        self.admit(T0, max_count=5)
        self.admit(T0 + DAY_SECONDS + 30, max_count=5)
        assert self.limiter.recorded("10.0.0.1") == [T0 + HOUR, T0 + DAY_SECONDS + 30]

    def test_recorded_for_unknown_key(self) -> None:
        assert self.limiter.recorded("nobody") == []


class TestConcurrentAdmission:
    """Admission must never over-admit under concurrent callers."""

    def test_exactly_quota_admitted_for_one_key(self) -> None:
        limiter = SlidingWindowRateLimiter()
        attempts = 64
        quota = 7
        barrier = threading.Barrier(attempts)

        def attempt(_: int) -> Admission:
            barrier.wait()
            return limiter.try_admit("10.0.0.1", T0, window_seconds=DAY_SECONDS, max_count=quota)

        with ThreadPoolExecutor(max_workers=attempts) as pool:
            results = list(pool.map(attempt, range(attempts)))

        assert results.count(Admission.ADMITTED) == quota
        assert results.count(Admission.DENIED) == attempts - quota
        assert len(limiter.recorded("10.0.0.1")) == quota

    def test_remaining_quota_respected(self) -> None:
        limiter = SlidingWindowRateLimiter()
        limiter.try_admit("10.0.0.1", T0, window_seconds=DAY_SECONDS, max_count=5)
        limiter.try_admit("10.0.0.1", T0, window_seconds=DAY_SECONDS, max_count=5)

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(
                pool.map(
                    lambda _: limiter.try_admit(
                        "10.0.0.1", T0 + 1, window_seconds=DAY_SECONDS, max_count=5
                    ),
                    range(16),
                )
            )

        assert results.count(Admission.ADMITTED) == 3

    def test_many_keys_each_get_full_quota(self) -> None:
        limiter = SlidingWindowRateLimiter()
        keys = [f"10.0.0.{i}" for i in range(10)]

        def attempt(key: str) -> Admission:
            return limiter.try_admit(key, T0, window_seconds=DAY_SECONDS, max_count=2)

        with ThreadPoolExecutor(max_workers=20) as pool:
            results = list(pool.map(attempt, keys * 5))

        assert results.count(Admission.ADMITTED) == 20
        for key in keys:
            assert len(limiter.recorded(key)) == 2
