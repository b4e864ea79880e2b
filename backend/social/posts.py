"""
Post Lifecycle Manager
======================

A post lives "under" exactly one artist, album or track. Creating it records
the post id in two containment lists:

    poster.posts   (the profile that wrote it)
    entity.posts   (the artist / album / track it is about)

Deleting it removes the id from both lists and hard-deletes the row.

WHAT IS NOT CASCADED:
---------------------
Comments on a deleted post stay stored. Their post_id points at a missing
row and they are no longer reachable through post.comments. This is kept on
purpose until a product decision says otherwise.
"""

import logging
from dataclasses import dataclass

from django.db import models, transaction

from .edges import add_id, discard_id, persist
from .errors import NotAuthorizedError, NotFoundError
from .models import Album, Artist, Post, PostContentType, PostType, Profile, Track
from .resolvers import find, resolve

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostTarget:
    model: type[models.Model]
    entity: str  # NotFoundError label
    field: str   # Post foreign key holding the target


POST_TARGETS = {
    PostType.ARTIST: PostTarget(Artist, 'Artist', 'artist'),
    PostType.ALBUM: PostTarget(Album, 'Album', 'album'),
    PostType.TRACK: PostTarget(Track, 'Track', 'track'),
}


def target_for(post_type) -> PostTarget:
    """Map 'artist' / 'ARTIST' / PostType.ARTIST to its PostTarget."""
    try:
        return POST_TARGETS[PostType(str(post_type).upper())]
    except ValueError:
        raise ValueError(f"Invalid post type: {post_type}")


def create_post(
    poster_id: int,
    title: str,
    post_type,
    entity_id: int,
    content_type,
    content: str
):
    """
    Create a post under an artist, album or track.

    SAVE ORDER: post, poster, entity.

    RETURNS: (post, poster, entity)
    """
    target = target_for(post_type)
    try:
        content_type = PostContentType(str(content_type).upper())
    except ValueError:
        raise ValueError(f"Invalid content type: {content_type}")

    with transaction.atomic():
        poster = find(Profile, poster_id, lock=True)
        if poster is None:
            raise NotFoundError('User')
        entity = resolve(target.model, entity_id, target.entity, lock=True)

        post = Post.objects.create(
            poster=poster,
            title=title,
            post_type=PostType(str(post_type).upper()),
            content_type=content_type,
            content=content,
            **{target.field: entity}
        )

        add_id(poster.posts, post.pk)
        add_id(entity.posts, post.pk)
        persist(poster, ['posts'])
        persist(entity, ['posts'])

    logger.debug(
        "post %s created by user %s under %s %s",
        post.pk, poster.pk, target.field, entity.pk
    )
    return post, poster, entity


def delete_post_by_id(post_id: int, requester_id: int = None):
    """
    Delete a post and remove it from its poster's and target's lists.

    When requester_id is given it must be the poster
    (NotAuthorizedError('delete post') otherwise).

    RETURNS: (post_id, poster, entity)
    """
    with transaction.atomic():
        # Unlocked read to learn which rows to lock, then lock in order
        snapshot = find(Post, post_id)
        if snapshot is None:
            raise NotFoundError('Post')
        target = target_for(snapshot.post_type)

        poster = find(Profile, snapshot.poster_id, lock=True)
        entity = find(target.model, snapshot.target_id, lock=True)
        post = find(Post, post_id, lock=True)

        if post is None:
            raise NotFoundError('Post')
        if requester_id is not None and post.poster_id != int(requester_id):
            raise NotAuthorizedError('delete post')
        if poster is None:
            raise NotFoundError('User')
        if entity is None:
            raise NotFoundError(target.entity)

        discard_id(poster.posts, post.pk)
        discard_id(entity.posts, post.pk)
        persist(poster, ['posts'])
        persist(entity, ['posts'])

        post.delete()

    logger.debug("post %s deleted", post_id)
    return post_id, poster, entity
