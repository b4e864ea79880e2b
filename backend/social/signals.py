"""
Django Signals for the social app.

1. create_profile: every new auth User gets a Profile with the same primary
   key, so user ids can be used directly in the edge lists.

2. refresh_user_cache: after a Profile row is saved, refresh its cache entry.
   The refresh is deferred with transaction.on_commit, so a rolled-back edge
   write never reaches the cache. robust=True logs a failing cache backend
   instead of failing the request that already committed.

NOTE: Signals do NOT fire on QuerySet.update() or bulk_update().
The services always call save(update_fields=...) on Profile, so every edge
write goes through here. reconcile.py also saves row by row for that reason.
"""

from functools import partial

from django.conf import settings
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .cache import cache_user, evict_user
from .models import Profile


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_profile(sender, instance, created, **kwargs):
    if created:
        Profile.objects.get_or_create(user=instance)


@receiver(post_save, sender=Profile)
def refresh_user_cache(sender, instance, **kwargs):
    transaction.on_commit(partial(cache_user, instance), robust=True)


@receiver(post_delete, sender=Profile)
def drop_user_cache(sender, instance, **kwargs):
    transaction.on_commit(partial(evict_user, instance.pk), robust=True)
