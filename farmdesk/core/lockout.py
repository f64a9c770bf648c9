"""
Login lockout tracking.

Failed attempts are counted per username in the Django cache. Once the
limit is reached the username is blocked until the lockout expires,
after which the counter starts from zero again.
"""
import logging
import time

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

ATTEMPTS_KEY_PREFIX = 'login_attempts:'
LOCKED_KEY_PREFIX = 'login_locked:'


def max_attempts() -> int:
    return getattr(settings, 'LOGIN_MAX_ATTEMPTS', 3)


def lockout_seconds() -> int:
    return getattr(settings, 'LOGIN_LOCKOUT_SECONDS', 600)


def _normalize(username) -> str:
    return (username or '').strip().lower()


def _attempts_key(username) -> str:
    return f"{ATTEMPTS_KEY_PREFIX}{_normalize(username)}"


def _locked_key(username) -> str:
    return f"{LOCKED_KEY_PREFIX}{_normalize(username)}"


def get_lockout_remaining(username) -> int:
    """Seconds left on an active lockout, 0 when the username is not locked"""
    locked_until = cache.get(_locked_key(username))
    if not locked_until:
        return 0
    remaining = int(locked_until - time.time())
    if remaining <= 0:
        cache.delete(_locked_key(username))
        return 0
    return remaining


def is_locked(username) -> bool:
    return get_lockout_remaining(username) > 0


def get_failed_attempts(username) -> int:
    return cache.get(_attempts_key(username), 0)


def register_failure(username):
    """
    Record a failed login attempt.

    Returns a tuple (attempts_remaining, locked_for_seconds). When the
    attempt triggers the lockout, attempts_remaining is 0 and
    locked_for_seconds is the lockout duration.
    """
    key = _attempts_key(username)
    duration = lockout_seconds()
    cache.add(key, 0, duration)
    try:
        attempts = cache.incr(key)
    except ValueError:
        # expired between add and incr
        cache.add(key, 1, duration)
        attempts = 1
    limit = max_attempts()

    if attempts >= limit:
        cache.set(_locked_key(username), time.time() + duration, duration)
        cache.delete(key)
        logger.warning(f"Login locked for '{_normalize(username)}' after {attempts} failed attempts ({duration}s)")
        return 0, duration

    logger.info(f"Failed login for '{_normalize(username)}' ({attempts}/{limit})")
    return limit - attempts, 0


def reset_attempts(username):
    """Clear failure counter and any lockout for the username"""
    cache.delete_many([_attempts_key(username), _locked_key(username)])
