"""
Read Queries
============

Read-only helpers for the API layer. Nothing here writes or locks.

COMMENT TREES:
--------------
All comments of a post are fetched in ONE query and the tree is assembled in
Python with a single pass over a {id -> node} map. Depth does not add
queries.

    1 query for post
    1 query for all comments + poster usernames

Soft-deleted comments are kept in the tree as tombstones; the serializer
blanks their content.
"""

from typing import Optional

from .errors import PrivacyError
from .models import Comment, Post, Profile
from .resolvers import get_profile


def get_post_with_poster(post_id: int) -> Optional[Post]:
    return (
        Post.objects
        .select_related('poster__user')
        .filter(id=post_id)
        .first()
    )


def get_all_comments_for_post(post_id: int) -> list[Comment]:
    """
    Fetch ALL comments for a post in a SINGLE query, oldest first.

    Ordering by created_at puts parents before their replies, which keeps
    tree building a single pass in the common case.
    """
    return list(
        Comment.objects
        .filter(post_id=post_id)
        .select_related('poster__user')
        .order_by('created_at', 'id')
    )


def build_comment_tree(flat_comments: list[Comment]) -> list[dict]:
    """
    Build nested tree structure from flat list.

    Example Input (flat):
        [Comment(id=1, parent=None), Comment(id=2, parent=1), Comment(id=3, parent=2)]

    Example Output (nested):
        [
            {
                'comment': Comment(id=1),
                'replies': [
                    {'comment': Comment(id=2), 'replies': [
                        {'comment': Comment(id=3), 'replies': []}
                    ]}
                ]
            }
        ]
    """
    nodes = {}
    for comment in flat_comments:
        nodes[comment.id] = {
            'comment': comment,
            'replies': []
        }

    root_nodes = []
    for comment in flat_comments:
        node = nodes[comment.id]
        if comment.parent_id is None:
            root_nodes.append(node)
        else:
            parent_node = nodes.get(comment.parent_id)
            if parent_node:
                parent_node['replies'].append(node)
            else:
                # Parent not in this post's comment set - show as root
                root_nodes.append(node)

    return root_nodes


def get_post_with_comment_tree(post_id: int) -> Optional[dict]:
    post = get_post_with_poster(post_id)
    if not post:
        return None

    flat_comments = get_all_comments_for_post(post_id)
    return {
        'post': post,
        'comments': build_comment_tree(flat_comments),
        'comment_count': len(flat_comments)
    }


def _profiles_in_list_order(ids: list) -> list[Profile]:
    rows = Profile.objects.select_related('user').in_bulk(ids)
    return [rows[pk] for pk in ids if pk in rows]


def _follow_list(user_id: int, viewer_id: Optional[int], field: str) -> list[Profile]:
    profile = get_profile(user_id)
    if not profile.follow_lists_public and viewer_id != profile.pk:
        raise PrivacyError('follow')
    return _profiles_in_list_order(getattr(profile, field))


def get_followers(user_id: int, viewer_id: Optional[int] = None) -> list[Profile]:
    """Profiles following user_id. Private lists are visible to their owner only."""
    return _follow_list(user_id, viewer_id, 'followers')


def get_following(user_id: int, viewer_id: Optional[int] = None) -> list[Profile]:
    return _follow_list(user_id, viewer_id, 'following')


def get_user_posts(user_id: int) -> list[Post]:
    """Posts listed on the profile, newest first."""
    profile = get_profile(user_id)
    return list(
        Post.objects
        .filter(pk__in=profile.posts)
        .select_related('poster__user')
        .order_by('-created_at')
    )
