"""
API tests: status codes, response envelopes and end-to-end scenarios.
"""

from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient

from social.cache import cache_user
from social.models import Comment, Post

from .base import make_catalogue, make_post, make_profile, reload


class APITestCase(TestCase):

    def setUp(self):
        cache.clear()
        self.alice = make_profile('alice')
        self.bob = make_profile('bob')
        self.artist, self.album, self.track = make_catalogue()
        self.client = APIClient()
        self.client.force_authenticate(user=self.alice.user)


class FollowAPITestCase(APITestCase):

    def test_follow_user(self):
        response = self.client.post(f'/api/users/{self.bob.pk}/follow/')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Successfully followed user.')
        self.assertEqual(response.data['user']['following'], [self.bob.pk])
        self.assertEqual(response.data['target']['followers'], [self.alice.pk])

    def test_follow_twice_conflict(self):
        self.client.post(f'/api/users/{self.bob.pk}/follow/')
        response = self.client.post(f'/api/users/{self.bob.pk}/follow/')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data, {'success': False, 'error': 'Already following user.'})

    def test_unfollow_user(self):
        self.client.post(f'/api/users/{self.bob.pk}/follow/')
        response = self.client.delete(f'/api/users/{self.bob.pk}/follow/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], 'Successfully unfollowed user.')
        self.assertEqual(reload(self.bob).followers, [])

    def test_follow_missing_user(self):
        response = self.client.post('/api/users/9999/follow/')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['error'], 'User could not be found.')

    def test_follow_artist(self):
        response = self.client.post(f'/api/artists/{self.artist.pk}/follow/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['target']['followers'], [self.alice.pk])

    def test_requires_authentication(self):
        response = APIClient().post(f'/api/users/{self.bob.pk}/follow/')
        self.assertIn(response.status_code, (401, 403))
        self.assertFalse(response.data['success'])


class ReactionAPITestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.post = make_post(self.bob, self.artist)

    def test_like_then_dislike(self):
        response = self.client.post(f'/api/posts/{self.post.pk}/like/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], 'Successfully liked the post.')
        self.assertEqual(response.data['target']['likes'], 1)

        response = self.client.post(f'/api/posts/{self.post.pk}/dislike/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['target']['likes'], 0)
        self.assertEqual(response.data['target']['dislikes'], 1)

    def test_undo_like_not_liked(self):
        response = self.client.delete(f'/api/posts/{self.post.pk}/like/')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['error'], 'The user has not liked the post.')

    def test_like_track(self):
        response = self.client.post(f'/api/tracks/{self.track.pk}/like/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], 'Successfully liked the track.')
        self.assertEqual(response.data['user']['liked_tracks'], [self.track.pk])


class PostAPITestCase(APITestCase):

    def test_create_post(self):
        response = self.client.post('/api/posts/', {
            'title': 'Glory Box appreciation',
            'post_type': 'track',
            'entity_id': self.track.pk,
            'content': 'That sample.',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['message'], 'Post successfully created.')
        post_id = response.data['post']['id']
        self.assertEqual(response.data['post']['post_type'], 'TRACK')
        self.assertEqual(response.data['user']['posts'], [post_id])
        self.assertEqual(response.data['target']['posts'], [post_id])

    def test_create_post_invalid_type(self):
        response = self.client.post('/api/posts/', {
            'title': 'T', 'post_type': 'playlist', 'entity_id': 1, 'content': 'C',
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data['success'])
        self.assertIn('post_type', response.data['details'])

    def test_create_post_missing_entity(self):
        response = self.client.post('/api/posts/', {
            'title': 'T', 'post_type': 'album', 'entity_id': 9999, 'content': 'C',
        }, format='json')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['error'], 'Album could not be found.')

    def test_delete_own_post(self):
        post = make_post(self.alice, self.artist)
        response = self.client.delete(f'/api/posts/{post.pk}/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], 'Successfully deleted post.')
        self.assertEqual(response.data['id'], post.pk)
        self.assertFalse(Post.objects.filter(pk=post.pk).exists())

    def test_delete_someone_elses_post(self):
        post = make_post(self.bob, self.artist)
        response = self.client.delete(f'/api/posts/{post.pk}/')

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['error'], 'Not authorized to delete post')

    def test_feed_newest_first(self):
        first = make_post(self.bob, self.artist, title='First')
        second = make_post(self.alice, self.album, post_type='ALBUM', title='Second')

        response = APIClient().get('/api/feed/')

        self.assertEqual(response.status_code, 200)
        ids = [post['id'] for post in response.data['results']]
        self.assertEqual(ids, [second.pk, first.pk])


class CommentAPITestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.post = make_post(self.bob, self.artist)

    def test_comment_and_reply(self):
        response = self.client.post(
            f'/api/posts/{self.post.pk}/comments/', {'content': 'Root'}, format='json'
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['message'], 'Successfully created comment.')
        root_id = response.data['comment']['id']
        self.assertEqual(response.data['post']['comments'], [root_id])

        response = self.client.post(
            f'/api/posts/{self.post.pk}/comments/',
            {'content': 'Reply', 'parent': root_id},
            format='json'
        )
        self.assertEqual(response.status_code, 201)
        reply_id = response.data['comment']['id']
        self.assertEqual(Comment.objects.get(pk=root_id).children, [reply_id])

    def test_post_detail_shows_tombstone(self):
        self.client.post(f'/api/posts/{self.post.pk}/comments/', {'content': 'Oops'}, format='json')
        comment = Comment.objects.get()

        response = self.client.delete(f'/api/comments/{comment.pk}/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], 'Successfully deleted comment.')

        response = APIClient().get(f'/api/posts/{self.post.pk}/')
        node = response.data['comment_tree'][0]['comment']
        self.assertTrue(node['is_deleted'])
        self.assertIsNone(node['content'])

    def test_delete_comment_twice(self):
        self.client.post(f'/api/posts/{self.post.pk}/comments/', {'content': 'Oops'}, format='json')
        comment = Comment.objects.get()
        self.client.delete(f'/api/comments/{comment.pk}/')

        response = self.client.delete(f'/api/comments/{comment.pk}/')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['error'], 'Comment already deleted.')

    def test_comment_on_missing_post(self):
        response = self.client.post('/api/posts/9999/comments/', {'content': 'Hi'}, format='json')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['error'], 'Post could not be found.')


class UserAPITestCase(APITestCase):

    def test_user_detail_from_database(self):
        response = APIClient().get(f'/api/users/{self.bob.pk}/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['username'], 'bob')

    def test_user_detail_from_cache(self):
        cache_user(self.bob)
        response = APIClient().get(f'/api/users/{self.bob.pk}/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['id'], self.bob.pk)

    def test_missing_user(self):
        response = APIClient().get('/api/users/9999/')
        self.assertEqual(response.status_code, 404)

    def test_private_followers(self):
        response = self.client.get(f'/api/users/{self.bob.pk}/followers/')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['error'], "User's follow setting is set to private.")

    def test_own_followers(self):
        bob_client = APIClient()
        bob_client.force_authenticate(user=self.bob.user)
        bob_client.post(f'/api/users/{self.alice.pk}/follow/')

        response = self.client.get(f'/api/users/{self.alice.pk}/followers/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual([user['username'] for user in response.data], ['bob'])

    def test_owner_makes_follow_lists_public(self):
        bob_client = APIClient()
        bob_client.force_authenticate(user=self.bob.user)
        bob_client.post(f'/api/users/{self.alice.pk}/follow/')

        response = self.client.patch(
            f'/api/users/{self.alice.pk}/privacy/', {'follow_lists_public': True}, format='json'
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], 'Successfully updated privacy settings.')
        self.assertTrue(response.data['user']['follow_lists_public'])

        response = APIClient().get(f'/api/users/{self.alice.pk}/followers/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual([user['username'] for user in response.data], ['bob'])

    def test_privacy_owner_only(self):
        response = self.client.patch(
            f'/api/users/{self.bob.pk}/privacy/', {'follow_lists_public': True}, format='json'
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['error'], 'Not authorized to update privacy settings')
        self.assertFalse(reload(self.bob).follow_lists_public)

    def test_privacy_requires_flag(self):
        response = self.client.patch(f'/api/users/{self.alice.pk}/privacy/', {}, format='json')
        self.assertEqual(response.status_code, 400)
