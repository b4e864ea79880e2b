"""
Tests for the admin: rows with mirrored lists cannot be created or rewired here.
"""

from django.contrib import admin
from django.contrib.auth.models import User
from django.test import RequestFactory, TestCase

from social.models import Comment, CommentState, Post
from social.threads import create_comment, delete_comment

from .base import make_catalogue, make_post, make_profile, reload


class SocialAdminTestCase(TestCase):

    def setUp(self):
        self.author = make_profile('author')
        artist, _, _ = make_catalogue()
        self.post = make_post(self.author, artist)
        self.comment, _, _ = create_comment(self.post.pk, self.author.pk, 'Regrettable')

        self.request = RequestFactory().get('/admin/')
        self.request.user = User.objects.create_superuser('root', 'root@test.com', 'pass')

    def test_comment_admin_cannot_resurrect(self):
        """Saving a deleted comment with state=ACTIVE leaves it deleted."""
        delete_comment(self.comment.pk, self.author.pk)
        comment = reload(self.comment)
        model_admin = admin.site._registry[Comment]

        form_class = model_admin.get_form(self.request, comment, change=True)
        self.assertEqual(list(form_class.base_fields), ['content'])

        form = form_class(data={'content': 'Edited', 'state': CommentState.ACTIVE}, instance=comment)
        self.assertTrue(form.is_valid())
        form.save()

        self.assertTrue(reload(self.comment).is_deleted)

    def test_post_admin_cannot_rewire_poster_or_target(self):
        model_admin = admin.site._registry[Post]
        form_class = model_admin.get_form(self.request, self.post, change=True)

        for name in ['poster', 'post_type', 'artist', 'album', 'track']:
            self.assertNotIn(name, form_class.base_fields)

    def test_no_add_or_delete_from_admin(self):
        for model in (Post, Comment):
            model_admin = admin.site._registry[model]
            self.assertFalse(model_admin.has_add_permission(self.request))
            self.assertFalse(model_admin.has_delete_permission(self.request))
