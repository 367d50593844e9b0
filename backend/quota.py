import os
import logging
import threading
from datetime import date

logger = logging.getLogger(__name__)

DAILY_LIMIT = int(os.getenv("DAILY_LIMIT", 60))
SWEEP_INTERVAL = int(os.getenv("QUOTA_SWEEP_INTERVAL", 24 * 60 * 60))  # once a day


# ============== Daily Request Quota ==============

class QuotaTracker:
    """
    In-memory per-caller request counter, bucketed by calendar day.
    Keys are (caller_id, day) pairs so a new day starts from zero without
    any reset. Counters live only in process memory.
    """
    def __init__(self, daily_limit=DAILY_LIMIT, today=date.today):
        self.daily_limit = daily_limit
        self._today = today
        self._counts = {}
        self._lock = threading.Lock()

    def _key(self, caller_id):
        return (caller_id, self._today().isoformat())

    def admit(self, caller_id):
        """Count one request for caller_id. Returns False once the daily limit is reached."""
        key = self._key(caller_id)
        with self._lock:
            count = self._counts.get(key, 0)
            if count >= self.daily_limit:
                return False
            self._counts[key] = count + 1
            return True

    def used(self, caller_id):
        key = self._key(caller_id)
        with self._lock:
            return self._counts.get(key, 0)

    def remaining(self, caller_id):
        return max(self.daily_limit - self.used(caller_id), 0)

    def sweep(self):
        """Drop counters from any day other than today. Returns how many were removed."""
        today = self._today().isoformat()
        with self._lock:
            stale = [k for k in list(self._counts) if k[1] != today]
        removed = 0
        for key in stale:
            with self._lock:
                if self._counts.pop(key, None) is not None:
                    removed += 1
        return removed

    def clear(self):
        with self._lock:
            self._counts.clear()

    def get_stats(self):
        today = self._today().isoformat()
        with self._lock:
            todays = [count for (_, day), count in self._counts.items() if day == today]
            return {
                "daily_limit": self.daily_limit,
                "total_keys": len(self._counts),
                "today_keys": len(todays),
                "total_requests_today": sum(todays),
            }


class QuotaSweeper:
    """Runs QuotaTracker.sweep on a repeating timer until stopped."""
    def __init__(self, tracker, interval=SWEEP_INTERVAL):
        self.tracker = tracker
        self.interval = interval
        self._timer = None
        self._lock = threading.Lock()
        self._stopped = True

    def _schedule(self):
        self._timer = threading.Timer(self.interval, self._run)
        self._timer.daemon = True
        self._timer.start()

    def _run(self):
        try:
            removed = self.tracker.sweep()
            if removed:
                logger.info("Swept %d stale quota entries", removed)
        except Exception as e:
            logger.error("Quota sweep failed: %s", e, exc_info=True)
        finally:
            # Schedule next sweep
            with self._lock:
                if not self._stopped:
                    self._schedule()

    def start(self):
        with self._lock:
            if not self._stopped:
                return
            self._stopped = False
            self._schedule()

    def stop(self):
        with self._lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def running(self):
        return not self._stopped
