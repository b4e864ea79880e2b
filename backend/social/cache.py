"""
Write-through cache of user snapshots.

The cache is a read accelerator only: it is refreshed after a profile write
commits (see signals.py) and nothing in the edge services reads it back.
Backed by Django's cache framework, so REDIS_URL switches it to Redis.
"""

import json
import logging
from typing import Optional

from django.conf import settings
from django.core.cache import cache
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger(__name__)

USER_CACHE_PREFIX = 'user'


def user_cache_key(user_id) -> str:
    return f"{USER_CACHE_PREFIX}:{user_id}"


def cache_user(profile) -> None:
    from .serializers import ProfileSerializer

    snapshot = json.dumps(ProfileSerializer(profile).data, cls=DjangoJSONEncoder)
    cache.set(user_cache_key(profile.pk), snapshot, timeout=settings.USER_CACHE_TTL)


def get_cached_user(user_id) -> Optional[dict]:
    snapshot = cache.get(user_cache_key(user_id))
    if snapshot is None:
        return None
    return json.loads(snapshot)


def evict_user(user_id) -> None:
    cache.delete(user_cache_key(user_id))
