"""
Reconciliation
==============

Detect and repair edges whose two sides disagree, and counters that drifted
from their lists. The edge services never leave such state behind (they
write both sides in one transaction), but rows imported from elsewhere,
edited by hand, or written before the services were transactional can.

REPAIR POLICY:
--------------
1. Duplicate ids in any list are collapsed (first occurrence kept)
2. A user with a target in BOTH liked_X and disliked_X keeps the like
3. Mirrored edges: the profile side is authoritative
   - profile shows the edge, target does not  -> completed on the target
   - target shows the edge, profile does not  -> removed from the target
   - profile points at a missing row          -> removed from the profile
4. Containment lists are rebuilt from the foreign keys:
   profile.posts / artist.posts / ... from Post, post.comments,
   comment.children and profile.comments from Comment
   (existing order kept, missing ids appended)
5. likes = len(likers), dislikes = len(dislikers)

Runs in one transaction with every row locked in the usual lock order, so it
can run while the API is live. dry_run computes the report without saving.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from django.db import transaction

from .edges import add_id, discard_id, persist
from .models import Album, Artist, Comment, Post, Profile, Track

logger = logging.getLogger(__name__)

PROFILE_LIST_FIELDS = [
    'following', 'followers', 'followed_artists', 'followed_albums',
    'followed_tracks', 'posts', 'comments', 'liked_posts', 'disliked_posts',
    'liked_comments', 'disliked_comments', 'liked_artists', 'liked_albums',
    'liked_tracks',
]
ENTITY_LIST_FIELDS = ['posts', 'likers', 'followers']
POST_LIST_FIELDS = ['likers', 'dislikers', 'comments']
COMMENT_LIST_FIELDS = ['likers', 'dislikers', 'children']


@dataclass
class ReconcileReport:
    repairs: list = field(default_factory=list)
    rows_saved: int = 0
    dry_run: bool = False

    def note(self, message: str, *args) -> None:
        text = message % args
        self.repairs.append(text)
        logger.warning("reconcile: %s", text)

    @property
    def clean(self) -> bool:
        return not self.repairs


class _Graph:
    """Every row of every collection, loaded and locked in lock order."""

    def __init__(self):
        self.profiles = self._load(Profile)
        self.artists = self._load(Artist)
        self.albums = self._load(Album)
        self.tracks = self._load(Track)
        self.posts = self._load(Post)
        self.comments = self._load(Comment)
        self._dirty = {}

    @staticmethod
    def _load(model):
        return {row.pk: row for row in model.objects.select_for_update().order_by('pk')}

    def touch(self, row, field_name: str) -> None:
        key = (type(row), row.pk)
        self._dirty.setdefault(key, (row, set()))[1].add(field_name)

    def save(self) -> int:
        for row, fields in self._dirty.values():
            persist(row, sorted(fields))
        return len(self._dirty)


def _dedupe(graph, report, rows, fields, label):
    for row in rows.values():
        for field_name in fields:
            ids = getattr(row, field_name)
            unique = list(dict.fromkeys(ids))
            if len(unique) != len(ids):
                setattr(row, field_name, unique)
                graph.touch(row, field_name)
                report.note("%s %s: collapsed duplicate ids in %s", label, row.pk, field_name)


def _like_wins(graph, report, targets, liked_field, disliked_field, dislikers_field, noun):
    for profile in graph.profiles.values():
        both = set(getattr(profile, liked_field)) & set(getattr(profile, disliked_field))
        for target_id in both:
            discard_id(getattr(profile, disliked_field), target_id)
            graph.touch(profile, disliked_field)
            target = targets.get(target_id)
            if target is not None and profile.pk in getattr(target, dislikers_field):
                discard_id(getattr(target, dislikers_field), profile.pk)
                graph.touch(target, dislikers_field)
            report.note("user %s both liked and disliked %s %s: kept like", profile.pk, noun, target_id)


def _mirror(graph, report, owner_field, targets, target_field, noun):
    owners = graph.profiles

    for owner in owners.values():
        ids = getattr(owner, owner_field)
        for target_id in list(ids):
            target = targets.get(target_id)
            if target is None:
                discard_id(ids, target_id)
                graph.touch(owner, owner_field)
                report.note("user %s %s: removed missing %s %s", owner.pk, owner_field, noun, target_id)
            elif owner.pk not in getattr(target, target_field):
                add_id(getattr(target, target_field), owner.pk)
                graph.touch(target, target_field)
                report.note("%s %s %s: completed edge from user %s", noun, target.pk, target_field, owner.pk)

    for target in targets.values():
        ids = getattr(target, target_field)
        for owner_id in list(ids):
            owner = owners.get(owner_id)
            if owner is None or target.pk not in getattr(owner, owner_field):
                discard_id(ids, owner_id)
                graph.touch(target, target_field)
                report.note("%s %s %s: dropped half edge from user %s", noun, target.pk, target_field, owner_id)


def _containment(graph, report, owners, owner_field, expected_by_owner, noun):
    for owner in owners.values():
        expected = expected_by_owner.get(owner.pk, [])
        expected_set = set(expected)
        current = getattr(owner, owner_field)
        rebuilt = [pk for pk in current if pk in expected_set]
        rebuilt += [pk for pk in expected if pk not in rebuilt]
        if rebuilt != current:
            setattr(owner, owner_field, rebuilt)
            graph.touch(owner, owner_field)
            report.note("%s %s: rebuilt %s", noun, owner.pk, owner_field)


def _group(rows, attribute):
    grouped = defaultdict(list)
    for row in rows:
        key = getattr(row, attribute)
        if key is not None:
            grouped[key].append(row.pk)
    return grouped


def _recount(graph, report, rows, pairs, noun):
    for row in rows.values():
        for list_field, counter_field in pairs:
            actual = len(getattr(row, list_field))
            if getattr(row, counter_field) != actual:
                report.note(
                    "%s %s: %s %s -> %s",
                    noun, row.pk, counter_field, getattr(row, counter_field), actual
                )
                setattr(row, counter_field, actual)
                graph.touch(row, counter_field)


def reconcile(dry_run: bool = False) -> ReconcileReport:
    report = ReconcileReport(dry_run=dry_run)

    with transaction.atomic():
        graph = _Graph()

        _dedupe(graph, report, graph.profiles, PROFILE_LIST_FIELDS, 'user')
        for rows, noun in ((graph.artists, 'artist'), (graph.albums, 'album'), (graph.tracks, 'track')):
            _dedupe(graph, report, rows, ENTITY_LIST_FIELDS, noun)
        _dedupe(graph, report, graph.posts, POST_LIST_FIELDS, 'post')
        _dedupe(graph, report, graph.comments, COMMENT_LIST_FIELDS, 'comment')

        _like_wins(graph, report, graph.posts, 'liked_posts', 'disliked_posts', 'dislikers', 'post')
        _like_wins(graph, report, graph.comments, 'liked_comments', 'disliked_comments', 'dislikers', 'comment')

        _mirror(graph, report, 'following', graph.profiles, 'followers', 'user')
        _mirror(graph, report, 'followed_artists', graph.artists, 'followers', 'artist')
        _mirror(graph, report, 'followed_albums', graph.albums, 'followers', 'album')
        _mirror(graph, report, 'followed_tracks', graph.tracks, 'followers', 'track')
        _mirror(graph, report, 'liked_posts', graph.posts, 'likers', 'post')
        _mirror(graph, report, 'disliked_posts', graph.posts, 'dislikers', 'post')
        _mirror(graph, report, 'liked_comments', graph.comments, 'likers', 'comment')
        _mirror(graph, report, 'disliked_comments', graph.comments, 'dislikers', 'comment')
        _mirror(graph, report, 'liked_artists', graph.artists, 'likers', 'artist')
        _mirror(graph, report, 'liked_albums', graph.albums, 'likers', 'album')
        _mirror(graph, report, 'liked_tracks', graph.tracks, 'likers', 'track')

        posts = graph.posts.values()
        comments = graph.comments.values()
        _containment(graph, report, graph.profiles, 'posts', _group(posts, 'poster_id'), 'user')
        _containment(graph, report, graph.artists, 'posts', _group(posts, 'artist_id'), 'artist')
        _containment(graph, report, graph.albums, 'posts', _group(posts, 'album_id'), 'album')
        _containment(graph, report, graph.tracks, 'posts', _group(posts, 'track_id'), 'track')
        _containment(graph, report, graph.profiles, 'comments', _group(comments, 'poster_id'), 'user')
        _containment(graph, report, graph.posts, 'comments', _group(comments, 'post_id'), 'post')
        _containment(graph, report, graph.comments, 'children', _group(comments, 'parent_id'), 'comment')

        likes_only = [('likers', 'likes')]
        likes_and_dislikes = [('likers', 'likes'), ('dislikers', 'dislikes')]
        _recount(graph, report, graph.artists, likes_only, 'artist')
        _recount(graph, report, graph.albums, likes_only, 'album')
        _recount(graph, report, graph.tracks, likes_only, 'track')
        _recount(graph, report, graph.posts, likes_and_dislikes, 'post')
        _recount(graph, report, graph.comments, likes_and_dislikes, 'comment')

        if not dry_run:
            report.rows_saved = graph.save()

    return report
