"""
Sync lease: Redis lock that keeps two scheduled sync runs from overlapping.

The reconciler itself has no notion of mutual exclusion; this lease is taken
by the Celery task before a run and released after it. The TTL bounds how
long a crashed worker can hold it.
Version: 1.0.0
"""
import logging
import uuid
from typing import Optional

import redis

from inventory_sync.core.config import settings

logger = logging.getLogger(__name__)

SYNC_LOCK_KEY = "inventory_sync:run_lock"

# Delete only while the stored token still matches
_RELEASE_SCRIPT = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


def _get_redis() -> redis.Redis:
    """Create a Redis client from the configured URL."""
    return redis.Redis.from_url(settings.redis_url, decode_responses=True)


def acquire_sync_lock(
    holder: Optional[str] = None,
    ttl: Optional[int] = None,
    client: Optional[redis.Redis] = None,
) -> Optional[str]:
    """Acquire the run lease (SET NX EX).

    Returns the lease token if acquired, None if another run holds it.
    """
    r = client or _get_redis()
    token = f"{holder or 'sync'}:{uuid.uuid4()}"
    ttl = ttl or settings.sync_lock_ttl_seconds

    acquired = r.set(SYNC_LOCK_KEY, token, nx=True, ex=ttl)

    if acquired:
        logger.info(f"Sync lock ACQUIRED: token={token}, ttl={ttl}s")
        return token

    logger.info(f"Sync lock HELD by {r.get(SYNC_LOCK_KEY)}, skipping")
    return None


def release_sync_lock(token: str, client: Optional[redis.Redis] = None) -> bool:
    """Release the run lease if this token still owns it."""
    r = client or _get_redis()
    released = bool(r.eval(_RELEASE_SCRIPT, 1, SYNC_LOCK_KEY, token))
    if released:
        logger.debug(f"Sync lock released: token={token}")
    else:
        logger.warning(f"Sync lock already expired or taken over: token={token}")
    return released
