"""
Comment Thread Manager
======================

Comments form a reply tree mirrored in both directions:

    comment.parent  (points up, None for top-level)
    parent.children (points down)

plus two containment lists: post.comments and profile.comments.

STATE MACHINE:
--------------
    ACTIVE --delete_comment--> DELETED     (terminal, no resurrection)

Deleting is a soft delete. The row, its parent pointer and every list that
mentions it stay as they are, so replies to a deleted comment keep a valid
anchor (a "tombstone"). Serializers hide the content of deleted comments.
"""

import logging

from django.db import transaction

from .edges import add_id, persist
from .errors import ConflictError, NotAuthorizedError, NotFoundError
from .models import Comment, CommentState, Post, Profile
from .resolvers import find

logger = logging.getLogger(__name__)


def create_comment(post_id: int, commenter_id: int, content: str, parent_id: int = None):
    """
    Create a comment (or a reply when parent_id is given).

    SAVE ORDER: comment, post, commenter, parent.
    The comment row is inserted first because its id is what the other
    three rows record.

    RETURNS: (comment, post, commenter). The parent is updated but not returned.
    """
    if not content or not content.strip():
        raise ValueError("Comment cannot be empty.")

    with transaction.atomic():
        # Locked in Profile -> Post -> Comment order, reported Post -> User -> Parent
        commenter = find(Profile, commenter_id, lock=True)
        post = find(Post, post_id, lock=True)
        parent = find(Comment, parent_id, lock=True)

        if post is None:
            raise NotFoundError('Post')
        if commenter is None:
            raise NotFoundError('User')
        if parent_id is not None and parent is None:
            raise NotFoundError('Parent comment')
        if parent is not None and parent.post_id != post.pk:
            raise ConflictError("Parent comment belongs to a different post.")

        comment = Comment.objects.create(
            post=post,
            poster=commenter,
            content=content.strip(),
            parent=parent,
        )

        add_id(post.comments, comment.pk)
        add_id(commenter.comments, comment.pk)
        persist(post, ['comments'])
        persist(commenter, ['comments'])

        if parent is not None:
            add_id(parent.children, comment.pk)
            persist(parent, ['children'])

    logger.debug(
        "comment %s created on post %s by user %s (parent=%s)",
        comment.pk, post.pk, commenter.pk, parent_id
    )
    return comment, post, commenter


def delete_comment(comment_id: int, commenter_id: int) -> Comment:
    """
    Soft-delete a comment owned by commenter_id.

    Only the comment row is written; post, commenter, parent and children
    are left untouched.
    """
    with transaction.atomic():
        commenter = find(Profile, commenter_id, lock=True)
        comment = find(Comment, comment_id, lock=True)

        if comment is None:
            raise NotFoundError('Comment')
        if commenter is None:
            raise NotFoundError('User')
        if comment.poster_id != commenter.pk:
            raise NotAuthorizedError('delete comment')
        if comment.is_deleted:
            raise ConflictError('Comment already deleted.')

        comment.state = CommentState.DELETED
        persist(comment, ['state'])

    logger.debug("comment %s deleted by user %s", comment.pk, commenter.pk)
    return comment
