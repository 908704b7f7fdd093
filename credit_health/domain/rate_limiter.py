"""Per-user cooldown gate for costly account aggregation refreshes"""

import logging
import math
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict
from credit_health.domain.models import RefreshDecision, RefreshStats
from credit_health.utils.date_utils import utc_now

STATS_WINDOW = timedelta(hours=1)


class RefreshRateLimiter:
    """
    Tracks the last permitted refresh per user and enforces a cooldown.

    One instance is created per application and shared by request handlers.
    State lives in process memory only; a restart forgets every record.

    can_refresh() followed by record_refresh() is a check-then-act sequence.
    acquire() performs both under the lock so concurrent requests for the
    same user cannot both be admitted.
    """

    def __init__(
        self,
        cooldown_minutes: int = 60,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.cooldown = timedelta(minutes=cooldown_minutes)
        self._clock = clock
        self._last_refresh: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def _decide(self, user_id: str, now: datetime) -> RefreshDecision:
        last_refresh = self._last_refresh.get(user_id)
        if last_refresh is None:
            return RefreshDecision(allowed=True)

        # A clock stepping backwards never extends the window
        elapsed = max(now - last_refresh, timedelta(0))
        if elapsed >= self.cooldown:
            return RefreshDecision(allowed=True)

        remaining_minutes = math.ceil((self.cooldown - elapsed) / timedelta(minutes=1))
        return RefreshDecision(allowed=False, remaining_minutes=remaining_minutes)

    def can_refresh(self, user_id: str) -> RefreshDecision:
        """Check eligibility without changing state"""
        with self._lock:
            return self._decide(user_id, self._clock())

    def record_refresh(self, user_id: str) -> None:
        """Record a refresh at the current time, regardless of eligibility"""
        now = self._clock()
        with self._lock:
            self._last_refresh[user_id] = now
        logging.info("Refresh recorded", extra={"user_id": user_id, "refreshed_at": now.isoformat()})

    def acquire(self, user_id: str) -> RefreshDecision:
        """Atomically check eligibility and record the refresh if allowed"""
        with self._lock:
            now = self._clock()
            decision = self._decide(user_id, now)
            if decision.allowed:
                self._last_refresh[user_id] = now
        if decision.allowed:
            logging.info("Refresh recorded", extra={"user_id": user_id, "refreshed_at": now.isoformat()})
        return decision

    def get_remaining_cooldown(self, user_id: str) -> int:
        """Whole minutes until the user may refresh again (0 when eligible)"""
        decision = self.can_refresh(user_id)
        return decision.remaining_minutes or 0

    def clear_limit(self, user_id: str) -> None:
        """Forget the user's last refresh (administrative override)"""
        with self._lock:
            self._last_refresh.pop(user_id, None)
        logging.info("Refresh limit cleared", extra={"user_id": user_id})

    def get_stats(self) -> RefreshStats:
        """Tracked users and refreshes within the last hour"""
        with self._lock:
            cutoff = self._clock() - STATS_WINDOW
            recent = sum(1 for ts in self._last_refresh.values() if ts > cutoff)
            return RefreshStats(
                total_tracked_users=len(self._last_refresh),
                refreshes_in_last_hour=recent,
            )
