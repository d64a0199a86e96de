from datetime import datetime, timedelta
from collections import defaultdict
from threading import Lock
import math


class RateLimiter:
    """Sliding-window in-memory rate limiter keyed by caller"""

    def __init__(self, max_requests: int = 100, window_seconds: int = 15 * 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.requests = defaultdict(list)
        self.lock = Lock()

    def _prune(self, identifier: str, now: datetime):
        cutoff = now - timedelta(seconds=self.window_seconds)
        recent = [t for t in self.requests.get(identifier, []) if t > cutoff]
        if recent:
            self.requests[identifier] = recent
        else:
            self.requests.pop(identifier, None)

    def is_allowed(self, identifier: str) -> bool:
        """Record a request for identifier and say whether it is under the cap"""
        with self.lock:
            now = datetime.now()
            self._prune(identifier, now)
            hits = self.requests[identifier]
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def retry_after(self, identifier: str) -> int:
        """Seconds until the oldest request in the window falls out of it"""
        with self.lock:
            now = datetime.now()
            self._prune(identifier, now)
            hits = self.requests.get(identifier, [])
            if len(hits) < self.max_requests:
                return 0
            oldest = hits[0]
            remaining = (oldest + timedelta(seconds=self.window_seconds) - now).total_seconds()
            return max(1, math.ceil(remaining))

