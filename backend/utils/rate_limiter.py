"""Request-count-per-window rate limiting, keyed per client."""
from datetime import datetime, timedelta, timezone
from typing import Optional
import os
import logging

from fastapi import Request

from utils.errors import RateLimitError

logger = logging.getLogger(__name__)

GENERAL_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
GENERAL_WINDOW_MINUTES = int(os.getenv("RATE_LIMIT_WINDOW_MINUTES", "15"))
LOGIN_MAX_ATTEMPTS = int(os.getenv("LOGIN_RATE_LIMIT_MAX_ATTEMPTS", "5"))
LOGIN_WINDOW_MINUTES = int(os.getenv("LOGIN_RATE_LIMIT_WINDOW_MINUTES", "15"))
CONTACT_MAX_SUBMISSIONS = int(os.getenv("CONTACT_RATE_LIMIT_MAX", "5"))
CONTACT_WINDOW_MINUTES = int(os.getenv("CONTACT_RATE_LIMIT_WINDOW_MINUTES", "60"))
UPLOAD_MAX_REQUESTS = int(os.getenv("UPLOAD_RATE_LIMIT_MAX", "10"))
UPLOAD_WINDOW_MINUTES = int(os.getenv("UPLOAD_RATE_LIMIT_WINDOW_MINUTES", "1"))
SWEEP_EVERY = 500

class RateLimiter:
    def __init__(self):
        # In-memory, per process
        self.attempts = {}
        self.windows = {}
        self._checks = 0

    def check_rate_limit(
        self,
        key: str,
        max_attempts: int,
        window_minutes: int,
        now: Optional[datetime] = None,
    ) -> tuple[bool, int]:
        """
        Record an attempt for key unless the window is already full.

        Returns:
            (allowed: bool, retry_after_seconds: int)
        """
        now = now or datetime.now(timezone.utc)
        window = timedelta(minutes=window_minutes)

        self._checks += 1
        if self._checks % SWEEP_EVERY == 0:
            self.sweep(now)
        self.windows[key] = window

        # Clean old entries
        recent = [t for t in self.attempts.get(key, []) if now - t < window]

        if len(recent) >= max_attempts:
            self.attempts[key] = recent
            wait_until = min(recent) + window
            return False, max(int((wait_until - now).total_seconds()), 1)

        recent.append(now)
        self.attempts[key] = recent
        return True, 0

    def sweep(self, now: Optional[datetime] = None) -> int:
        """Forget keys whose newest attempt has left its window. Returns how many."""
        now = now or datetime.now(timezone.utc)
        stale = [
            key for key, times in self.attempts.items()
            if not times or now - times[-1] >= self.windows.get(key, timedelta(0))
        ]
        for key in stale:
            self.reset(key)
        return len(stale)

    def reset(self, key: str) -> None:
        self.attempts.pop(key, None)
        self.windows.pop(key, None)

    def clear(self) -> None:
        self.attempts.clear()
        self.windows.clear()

rate_limiter = RateLimiter()


def client_key(request: Request) -> str:
    """Identify the caller: first X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def enforce(key: str, max_attempts: int, window_minutes: int, message: str) -> None:
    allowed, retry_after = rate_limiter.check_rate_limit(key, max_attempts, window_minutes)
    if not allowed:
        logger.warning(f"Rate limit exceeded for {key}")
        raise RateLimitError(message, retry_after=retry_after)


def login_rate_key(request: Request) -> str:
    return f"login:{client_key(request)}"


async def limit_login_attempts(request: Request) -> None:
    """Dependency for the login route; a successful login resets the counter."""
    enforce(
        login_rate_key(request),
        LOGIN_MAX_ATTEMPTS,
        LOGIN_WINDOW_MINUTES,
        "Too many authentication attempts, please try again later.",
    )


async def limit_contact_submissions(request: Request) -> None:
    enforce(
        f"contact:{client_key(request)}",
        CONTACT_MAX_SUBMISSIONS,
        CONTACT_WINDOW_MINUTES,
        "Too many messages sent, please try again later.",
    )


async def limit_uploads(request: Request) -> None:
    """Counts multipart requests only; JSON writes to the same route carry no files."""
    if not request.headers.get("content-type", "").startswith("multipart/form-data"):
        return
    enforce(
        f"upload:{client_key(request)}",
        UPLOAD_MAX_REQUESTS,
        UPLOAD_WINDOW_MINUTES,
        "Too many file uploads, please try again later.",
    )
