"""
Tests for the post lifecycle (posts.py)
"""

from django.db import IntegrityError, transaction
from django.test import TestCase

from social.errors import NotAuthorizedError, NotFoundError
from social.models import Comment, Post, PostContentType, PostType
from social.posts import create_post, delete_post_by_id, target_for
from social.threads import create_comment

from .base import make_catalogue, make_profile, reload


class CreatePostTestCase(TestCase):

    def setUp(self):
        self.poster = make_profile('poster')
        self.artist, self.album, self.track = make_catalogue()

    def test_post_under_artist(self):
        post, poster, artist = create_post(
            self.poster.pk, 'Trip-hop forever', 'ARTIST', self.artist.pk, 'TEXT', 'Still great.'
        )

        self.assertEqual(post.post_type, PostType.ARTIST)
        self.assertEqual(post.artist_id, self.artist.pk)
        self.assertIsNone(post.album_id)
        self.assertIsNone(post.track_id)
        self.assertEqual(post.target_id, self.artist.pk)
        self.assertEqual(poster.posts, [post.pk])
        self.assertEqual(artist.posts, [post.pk])

        self.assertEqual(reload(self.poster).posts, [post.pk])
        self.assertEqual(reload(self.artist).posts, [post.pk])

    def test_post_under_track_lowercase_type(self):
        post, _, track = create_post(
            self.poster.pk, 'That bassline', 'track', self.track.pk, 'media', 'https://example.com/clip'
        )
        self.assertEqual(post.post_type, PostType.TRACK)
        self.assertEqual(post.content_type, PostContentType.MEDIA)
        self.assertEqual(reload(self.track).posts, [post.pk])
        # Other entities untouched
        self.assertEqual(reload(self.artist).posts, [])
        self.assertEqual(reload(self.album).posts, [])

    def test_new_post_has_empty_reactions(self):
        post, _, _ = create_post(self.poster.pk, 'T', 'ALBUM', self.album.pk, 'TEXT', 'C')
        self.assertEqual((post.likes, post.dislikes), (0, 0))
        self.assertEqual((post.likers, post.dislikers, post.comments), ([], [], []))

    def test_missing_entity(self):
        with self.assertRaises(NotFoundError) as ctx:
            create_post(self.poster.pk, 'T', 'ALBUM', 9999, 'TEXT', 'C')
        self.assertEqual(str(ctx.exception), 'Album could not be found.')
        self.assertFalse(Post.objects.exists())
        self.assertEqual(reload(self.poster).posts, [])

    def test_missing_poster(self):
        with self.assertRaises(NotFoundError) as ctx:
            create_post(9999, 'T', 'ARTIST', self.artist.pk, 'TEXT', 'C')
        self.assertEqual(str(ctx.exception), 'User could not be found.')

    def test_invalid_post_type(self):
        with self.assertRaises(ValueError):
            create_post(self.poster.pk, 'T', 'PLAYLIST', self.artist.pk, 'TEXT', 'C')

    def test_invalid_content_type(self):
        with self.assertRaises(ValueError):
            create_post(self.poster.pk, 'T', 'ARTIST', self.artist.pk, 'VIDEO', 'C')

    def test_target_for(self):
        self.assertEqual(target_for('album').field, 'album')
        self.assertEqual(target_for(PostType.TRACK).entity, 'Track')

    def test_row_with_two_targets_rejected_by_database(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Post.objects.create(
                    poster=self.poster, title='T', post_type=PostType.ARTIST,
                    artist=self.artist, album=self.album, content='C'
                )


class DeletePostTestCase(TestCase):

    def setUp(self):
        self.poster = make_profile('poster')
        self.other = make_profile('other')
        self.artist, _, _ = make_catalogue()
        self.post, _, _ = create_post(self.poster.pk, 'T', 'ARTIST', self.artist.pk, 'TEXT', 'C')

    def test_delete_cleans_both_lists(self):
        post_id, poster, artist = delete_post_by_id(self.post.pk)

        self.assertEqual(post_id, self.post.pk)
        self.assertEqual(poster.posts, [])
        self.assertEqual(artist.posts, [])
        self.assertFalse(Post.objects.filter(pk=self.post.pk).exists())
        self.assertEqual(reload(self.poster).posts, [])
        self.assertEqual(reload(self.artist).posts, [])

    def test_delete_by_poster(self):
        delete_post_by_id(self.post.pk, requester_id=self.poster.pk)
        self.assertFalse(Post.objects.filter(pk=self.post.pk).exists())

    def test_delete_by_someone_else(self):
        with self.assertRaises(NotAuthorizedError) as ctx:
            delete_post_by_id(self.post.pk, requester_id=self.other.pk)
        self.assertEqual(str(ctx.exception), 'Not authorized to delete post')
        self.assertTrue(Post.objects.filter(pk=self.post.pk).exists())
        self.assertEqual(reload(self.poster).posts, [self.post.pk])

    def test_delete_missing_post(self):
        with self.assertRaises(NotFoundError) as ctx:
            delete_post_by_id(9999)
        self.assertEqual(str(ctx.exception), 'Post could not be found.')

    def test_delete_twice(self):
        delete_post_by_id(self.post.pk)
        with self.assertRaises(NotFoundError):
            delete_post_by_id(self.post.pk)

    def test_comments_survive_post_deletion(self):
        comment, _, _ = create_comment(self.post.pk, self.other.pk, 'Still here')

        delete_post_by_id(self.post.pk)

        comment = Comment.objects.get(pk=comment.pk)
        self.assertEqual(comment.post_id, self.post.pk)
        self.assertEqual(reload(self.other).comments, [comment.pk])
