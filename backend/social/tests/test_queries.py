"""
Tests for read queries: comment trees and follow lists.
"""

from django.db import connection
from django.test import TestCase
from django.test.utils import CaptureQueriesContext

from social.edges import follow_user
from social.errors import NotFoundError, PrivacyError
from social.models import Profile
from social.posts import create_post
from social.queries import (
    build_comment_tree,
    get_all_comments_for_post,
    get_followers,
    get_following,
    get_post_with_comment_tree,
    get_user_posts,
)
from social.threads import create_comment, delete_comment

from .base import make_catalogue, make_post, make_profile


class CommentTreeTestCase(TestCase):
    """
    Test comment tree building.

    CRITICAL: Verify N+1 prevention.
    """

    def setUp(self):
        self.user = make_profile('user')
        artist, _, _ = make_catalogue()
        self.post = make_post(self.user, artist)

    def test_tree_building_single_level(self):
        """Flat comments should be returned as separate trees."""
        c1, _, _ = create_comment(self.post.pk, self.user.pk, 'Comment 1')
        c2, _, _ = create_comment(self.post.pk, self.user.pk, 'Comment 2')

        tree = build_comment_tree(get_all_comments_for_post(self.post.pk))

        self.assertEqual(len(tree), 2)
        self.assertEqual(tree[0]['comment'].id, c1.id)
        self.assertEqual(tree[1]['comment'].id, c2.id)

    def test_tree_building_nested(self):
        """Nested comments should be in replies array."""
        c1, _, _ = create_comment(self.post.pk, self.user.pk, 'Comment 1')
        c2, _, _ = create_comment(self.post.pk, self.user.pk, 'Reply to 1', c1.pk)
        c3, _, _ = create_comment(self.post.pk, self.user.pk, 'Reply to reply', c2.pk)

        tree = build_comment_tree(get_all_comments_for_post(self.post.pk))

        self.assertEqual(len(tree), 1)  # One root
        self.assertEqual(tree[0]['replies'][0]['comment'].id, c2.id)
        self.assertEqual(tree[0]['replies'][0]['replies'][0]['comment'].id, c3.id)

    def test_deleted_comment_stays_in_tree(self):
        c1, _, _ = create_comment(self.post.pk, self.user.pk, 'Comment 1')
        c2, _, _ = create_comment(self.post.pk, self.user.pk, 'Reply', c1.pk)
        delete_comment(c1.pk, self.user.pk)

        tree = build_comment_tree(get_all_comments_for_post(self.post.pk))

        self.assertTrue(tree[0]['comment'].is_deleted)
        self.assertEqual(tree[0]['replies'][0]['comment'].id, c2.id)

    def test_no_n_plus_one_queries(self):
        """Loading 50 comments must NOT cause 50 queries."""
        parent = None
        for i in range(50):
            if i % 5 == 0:
                parent, _, _ = create_comment(self.post.pk, self.user.pk, f'Comment {i}')
            else:
                create_comment(self.post.pk, self.user.pk, f'Reply {i}', parent.pk)

        with CaptureQueriesContext(connection) as context:
            result = get_post_with_comment_tree(self.post.pk)

        self.assertLessEqual(len(context), 2)
        self.assertEqual(result['comment_count'], 50)
        self.assertEqual(len(result['comments']), 10)

    def test_missing_post(self):
        self.assertIsNone(get_post_with_comment_tree(9999))


class FollowListTestCase(TestCase):

    def setUp(self):
        self.alice = make_profile('alice')
        self.bob = make_profile('bob')
        self.carol = make_profile('carol')
        follow_user(self.bob.pk, self.alice.pk)
        follow_user(self.carol.pk, self.alice.pk)

    def test_private_list_visible_to_owner(self):
        followers = get_followers(self.alice.pk, viewer_id=self.alice.pk)
        self.assertEqual([p.pk for p in followers], [self.bob.pk, self.carol.pk])

    def test_private_list_hidden_from_others(self):
        with self.assertRaises(PrivacyError) as ctx:
            get_followers(self.alice.pk, viewer_id=self.bob.pk)
        self.assertEqual(str(ctx.exception), "User's follow setting is set to private.")

        with self.assertRaises(PrivacyError):
            get_following(self.bob.pk)

    def test_public_list(self):
        Profile.objects.filter(pk=self.bob.pk).update(follow_lists_public=True)
        following = get_following(self.bob.pk)
        self.assertEqual([p.username for p in following], ['alice'])

    def test_missing_user(self):
        with self.assertRaises(NotFoundError):
            get_followers(9999)


class UserPostsTestCase(TestCase):

    def test_newest_first(self):
        poster = make_profile('poster')
        artist, album, _ = make_catalogue()
        first, _, _ = create_post(poster.pk, 'First', 'ARTIST', artist.pk, 'TEXT', 'C')
        second, _, _ = create_post(poster.pk, 'Second', 'ALBUM', album.pk, 'TEXT', 'C')

        posts = get_user_posts(poster.pk)
        self.assertEqual([p.pk for p in posts], [second.pk, first.pk])
