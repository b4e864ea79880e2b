"""
Relationship Engine
===================

Create and remove edges that are stored twice, once on each endpoint:

    follow:    profile.following        <-> profile.followers
               profile.followed_artists <-> artist.followers   (album, track)
    reaction:  profile.liked_posts      <-> post.likers        (+ post.likes)
               profile.disliked_posts   <-> post.dislikers     (+ post.dislikes)
               ... same shape for comments, and likes for artist/album/track

PROTOCOL:
---------
1. Resolve both rows, locked (SELECT ... FOR UPDATE) inside one transaction
2. Check the edge state on BOTH sides; reject with ConflictError before
   touching anything
3. Mutate the two in-memory rows
4. Save owner (the profile), then target

An edge counts as present only when both sides show it. Unlink/undo require
that conjunction; link/react reject only on it.

ATOMICITY:
----------
All saves of one operation share a transaction.atomic() block. If the second
save fails the first one is rolled back, and the row locks stop two concurrent
follows of the same pair from both passing the "not following yet" check.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction

from .errors import ConflictError, FollowError
from .resolvers import (
    get_album,
    get_artist,
    get_comment,
    get_post,
    get_profile,
    get_track,
    lock_profiles,
)

logger = logging.getLogger(__name__)


# ============================================================================
# ID-LIST HELPERS
# ============================================================================

def add_id(ids: list, pk) -> None:
    """Append pk unless already present (lists have set semantics)."""
    if pk not in ids:
        ids.append(pk)


def discard_id(ids: list, pk) -> None:
    """Remove every occurrence of pk."""
    ids[:] = [value for value in ids if value != pk]


def persist(instance, fields) -> None:
    """Save only the given fields (plus updated_at where the model has it)."""
    update_fields = list(dict.fromkeys(fields))
    if hasattr(instance, 'updated_at'):
        update_fields.append('updated_at')
    instance.save(update_fields=update_fields)


# ============================================================================
# SYMMETRIC LINKS (follow)
# ============================================================================

@dataclass(frozen=True)
class Edge:
    owner_field: str
    target_field: str
    already_linked: str
    not_linked: str
    error: type = ConflictError

    def present(self, owner, target) -> bool:
        return (
            target.pk in getattr(owner, self.owner_field)
            and owner.pk in getattr(target, self.target_field)
        )


USER_FOLLOW = Edge(
    'following', 'followers',
    'Already following user.', 'Already not following user.',
    FollowError
)
ARTIST_FOLLOW = Edge(
    'followed_artists', 'followers',
    'Already following artist.', 'Already not following artist.'
)
ALBUM_FOLLOW = Edge(
    'followed_albums', 'followers',
    'Already following album.', 'Already not following album.'
)
TRACK_FOLLOW = Edge(
    'followed_tracks', 'followers',
    'Already following track.', 'Already not following track.'
)


def link(owner, target, edge: Edge):
    """Add the edge on both rows and persist owner, then target."""
    if edge.present(owner, target):
        raise edge.error(edge.already_linked)

    add_id(getattr(owner, edge.owner_field), target.pk)
    add_id(getattr(target, edge.target_field), owner.pk)

    persist(owner, [edge.owner_field])
    persist(target, [edge.target_field])
    return owner, target


def unlink(owner, target, edge: Edge):
    """Remove the edge from both rows; both must currently show it."""
    if not edge.present(owner, target):
        raise edge.error(edge.not_linked)

    discard_id(getattr(owner, edge.owner_field), target.pk)
    discard_id(getattr(target, edge.target_field), owner.pk)

    persist(owner, [edge.owner_field])
    persist(target, [edge.target_field])
    return owner, target


def _user_edge(action, follower_id: int, target_id: int):
    follower_id, target_id = int(follower_id), int(target_id)
    if follower_id == target_id:
        # Nobody is ever in their own following list
        if action is unlink:
            raise FollowError(USER_FOLLOW.not_linked)
        raise FollowError('Cannot follow yourself.')
    with transaction.atomic():
        profiles = lock_profiles(follower_id, target_id)
        result = action(profiles[follower_id], profiles[target_id], USER_FOLLOW)
    logger.debug("%s: user %s -> user %s", action.__name__, follower_id, target_id)
    return result


def follow_user(follower_id: int, target_id: int):
    """Returns (follower, target) profiles."""
    return _user_edge(link, follower_id, target_id)


def unfollow_user(follower_id: int, target_id: int):
    return _user_edge(unlink, follower_id, target_id)


def _entity_edge(action, edge: Edge, resolver, user_id: int, entity_id: int):
    # Profile is always locked before the entity row
    with transaction.atomic():
        profile = get_profile(user_id, lock=True)
        entity = resolver(entity_id, lock=True)
        result = action(profile, entity, edge)
    logger.debug(
        "%s: user %s -> %s %s",
        action.__name__, user_id, type(entity).__name__.lower(), entity_id
    )
    return result


def follow_artist(user_id: int, artist_id: int):
    return _entity_edge(link, ARTIST_FOLLOW, get_artist, user_id, artist_id)


def unfollow_artist(user_id: int, artist_id: int):
    return _entity_edge(unlink, ARTIST_FOLLOW, get_artist, user_id, artist_id)


def follow_album(user_id: int, album_id: int):
    return _entity_edge(link, ALBUM_FOLLOW, get_album, user_id, album_id)


def unfollow_album(user_id: int, album_id: int):
    return _entity_edge(unlink, ALBUM_FOLLOW, get_album, user_id, album_id)


def follow_track(user_id: int, track_id: int):
    return _entity_edge(link, TRACK_FOLLOW, get_track, user_id, track_id)


def unfollow_track(user_id: int, track_id: int):
    return _entity_edge(unlink, TRACK_FOLLOW, get_track, user_id, track_id)


# ============================================================================
# REACTIONS (like / dislike)
# ============================================================================

@dataclass(frozen=True)
class Reaction:
    """
    One reaction edge: which list on the profile, which list + counter on
    the target, and how to name it in error messages.
    """
    noun: str
    verb: str
    user_field: str
    target_field: str
    counter_field: str

    def present(self, profile, target) -> bool:
        return (
            target.pk in getattr(profile, self.user_field)
            and profile.pk in getattr(target, self.target_field)
        )

    def partially_present(self, profile, target) -> bool:
        return (
            target.pk in getattr(profile, self.user_field)
            or profile.pk in getattr(target, self.target_field)
        )

    def add(self, profile, target) -> None:
        add_id(getattr(profile, self.user_field), target.pk)
        add_id(getattr(target, self.target_field), profile.pk)
        self.recount(target)

    def remove(self, profile, target) -> None:
        discard_id(getattr(profile, self.user_field), target.pk)
        discard_id(getattr(target, self.target_field), profile.pk)
        self.recount(target)

    def recount(self, target) -> None:
        setattr(target, self.counter_field, len(getattr(target, self.target_field)))

    @property
    def profile_fields(self):
        return [self.user_field]

    @property
    def target_fields(self):
        return [self.target_field, self.counter_field]


LIKE_POST = Reaction('post', 'liked', 'liked_posts', 'likers', 'likes')
DISLIKE_POST = Reaction('post', 'disliked', 'disliked_posts', 'dislikers', 'dislikes')
LIKE_COMMENT = Reaction('comment', 'liked', 'liked_comments', 'likers', 'likes')
DISLIKE_COMMENT = Reaction('comment', 'disliked', 'disliked_comments', 'dislikers', 'dislikes')
LIKE_ARTIST = Reaction('artist', 'liked', 'liked_artists', 'likers', 'likes')
LIKE_ALBUM = Reaction('album', 'liked', 'liked_albums', 'likers', 'likes')
LIKE_TRACK = Reaction('track', 'liked', 'liked_tracks', 'likers', 'likes')

# Artist/album/track have no dislike, so they have no opposite
OPPOSITES = {
    LIKE_POST: DISLIKE_POST,
    DISLIKE_POST: LIKE_POST,
    LIKE_COMMENT: DISLIKE_COMMENT,
    DISLIKE_COMMENT: LIKE_COMMENT,
}


def react(profile, target, reaction: Reaction):
    """
    Record a like or dislike.

    SIDE EFFECT: an opposite reaction by the same user is cleared in the same
    write, so a user is never in both likers and dislikers.
    """
    if reaction.present(profile, target):
        raise ConflictError(
            f"The {reaction.noun} is already {reaction.verb} by this user."
        )

    profile_fields = reaction.profile_fields
    target_fields = reaction.target_fields
    reaction.add(profile, target)

    opposite: Optional[Reaction] = OPPOSITES.get(reaction)
    if opposite is not None and opposite.partially_present(profile, target):
        opposite.remove(profile, target)
        profile_fields = profile_fields + opposite.profile_fields
        target_fields = target_fields + opposite.target_fields

    persist(profile, profile_fields)
    persist(target, target_fields)
    return profile, target


def undo(profile, target, reaction: Reaction):
    """Remove a like or dislike the user currently holds."""
    if not reaction.present(profile, target):
        raise ConflictError(
            f"The user has not {reaction.verb} the {reaction.noun}."
        )

    opposite: Optional[Reaction] = OPPOSITES.get(reaction)
    if opposite is not None and opposite.present(profile, target):
        # Both reactions at once means the rows were written outside this
        # module; leave them for reconcile_edges.
        raise ConflictError(
            f"The {reaction.noun} is both liked and disliked by this user."
        )

    reaction.remove(profile, target)
    persist(profile, reaction.profile_fields)
    persist(target, reaction.target_fields)
    return profile, target


def _reaction(action, reaction: Reaction, resolver, user_id: int, target_id: int):
    with transaction.atomic():
        profile = get_profile(user_id, lock=True)
        target = resolver(target_id, lock=True)
        result = action(profile, target, reaction)
    logger.debug(
        "%s %s: user %s -> %s %s",
        action.__name__, reaction.verb, user_id, reaction.noun, target_id
    )
    return result


def like_post(user_id: int, post_id: int):
    """Returns (profile, post)."""
    return _reaction(react, LIKE_POST, get_post, user_id, post_id)


def undo_like_post(user_id: int, post_id: int):
    return _reaction(undo, LIKE_POST, get_post, user_id, post_id)


def dislike_post(user_id: int, post_id: int):
    return _reaction(react, DISLIKE_POST, get_post, user_id, post_id)


def undo_dislike_post(user_id: int, post_id: int):
    return _reaction(undo, DISLIKE_POST, get_post, user_id, post_id)


def like_comment(user_id: int, comment_id: int):
    """Returns (profile, comment). Deleted comments can still be reacted to."""
    return _reaction(react, LIKE_COMMENT, get_comment, user_id, comment_id)


def undo_like_comment(user_id: int, comment_id: int):
    return _reaction(undo, LIKE_COMMENT, get_comment, user_id, comment_id)


def dislike_comment(user_id: int, comment_id: int):
    return _reaction(react, DISLIKE_COMMENT, get_comment, user_id, comment_id)


def undo_dislike_comment(user_id: int, comment_id: int):
    return _reaction(undo, DISLIKE_COMMENT, get_comment, user_id, comment_id)


def like_artist(user_id: int, artist_id: int):
    return _reaction(react, LIKE_ARTIST, get_artist, user_id, artist_id)


def undo_like_artist(user_id: int, artist_id: int):
    return _reaction(undo, LIKE_ARTIST, get_artist, user_id, artist_id)


def like_album(user_id: int, album_id: int):
    return _reaction(react, LIKE_ALBUM, get_album, user_id, album_id)


def undo_like_album(user_id: int, album_id: int):
    return _reaction(undo, LIKE_ALBUM, get_album, user_id, album_id)


def like_track(user_id: int, track_id: int):
    return _reaction(react, LIKE_TRACK, get_track, user_id, track_id)


def undo_like_track(user_id: int, track_id: int):
    return _reaction(undo, LIKE_TRACK, get_track, user_id, track_id)


# ============================================================================
# DISPATCH TABLES (used by the API layer)
# ============================================================================

# kind -> (do, undo)
FOLLOW_OPERATIONS = {
    'user': (follow_user, unfollow_user),
    'artist': (follow_artist, unfollow_artist),
    'album': (follow_album, unfollow_album),
    'track': (follow_track, unfollow_track),
}

# (kind, reaction) -> (do, undo)
REACTION_OPERATIONS = {
    ('post', 'like'): (like_post, undo_like_post),
    ('post', 'dislike'): (dislike_post, undo_dislike_post),
    ('comment', 'like'): (like_comment, undo_like_comment),
    ('comment', 'dislike'): (dislike_comment, undo_dislike_comment),
    ('artist', 'like'): (like_artist, undo_like_artist),
    ('album', 'like'): (like_album, undo_like_album),
    ('track', 'like'): (like_track, undo_like_track),
}
