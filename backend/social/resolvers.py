"""
Identity resolvers: id -> row, or NotFoundError.

Every mutating service loads its rows through these helpers inside a
transaction with lock=True, so the rows stay locked (SELECT ... FOR UPDATE)
until the edge write commits.

LOCK ORDER:
-----------
Services that lock several rows take them in this order, so two requests
never wait on each other in a cycle:

    Profile -> Artist / Album / Track -> Post -> Comment

Where an operation must report a missing Post before a missing User, it loads
with find() in lock order and raises afterwards.
"""

from django.db import models

from .errors import NotFoundError
from .models import Album, Artist, Comment, Post, Profile, Track


def find(model: type[models.Model], pk, lock: bool = False):
    """Load a single row by primary key, or None."""
    if pk is None:
        return None
    queryset = model.objects.all()
    if lock:
        queryset = queryset.select_for_update()
    elif model is Profile:
        queryset = queryset.select_related('user')
    return queryset.filter(pk=pk).first()


def resolve(model: type[models.Model], pk, entity: str, lock: bool = False):
    """Load a single row by primary key or raise NotFoundError(entity)."""
    instance = find(model, pk, lock)
    if instance is None:
        raise NotFoundError(entity)
    return instance


def get_profile(pk, lock: bool = False, entity: str = 'User') -> Profile:
    return resolve(Profile, pk, entity, lock)


def get_artist(pk, lock: bool = False) -> Artist:
    return resolve(Artist, pk, 'Artist', lock)


def get_album(pk, lock: bool = False) -> Album:
    return resolve(Album, pk, 'Album', lock)


def get_track(pk, lock: bool = False) -> Track:
    return resolve(Track, pk, 'Track', lock)


def get_post(pk, lock: bool = False) -> Post:
    return resolve(Post, pk, 'Post', lock)


def get_comment(pk, lock: bool = False, entity: str = 'Comment') -> Comment:
    return resolve(Comment, pk, entity, lock)


def lock_profiles(*pks) -> dict:
    """
    Lock several profiles at once, in primary-key order.

    Two requests following each other in opposite directions would deadlock
    if each locked "its own" row first; a single ordered SELECT ... FOR UPDATE
    makes every caller acquire the locks in the same order.

    Returns {pk: Profile}. Raises NotFoundError('User') if any pk is missing.
    """
    wanted = set(pks)
    rows = (
        Profile.objects
        .select_for_update()
        .filter(pk__in=wanted)
        .order_by('pk')
    )
    found = {profile.pk: profile for profile in rows}
    if len(found) != len(wanted):
        raise NotFoundError('User')
    return found
