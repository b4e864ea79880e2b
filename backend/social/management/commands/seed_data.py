"""
Management command to seed the database with sample data.

Usage: python manage.py seed_data

Everything after the catalogue goes through the services, so the seeded
rows satisfy the same edge invariants as rows written through the API.
"""

import random

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from social.edges import (
    dislike_post,
    follow_artist,
    follow_user,
    like_album,
    like_comment,
    like_post,
    like_track,
)
from social.errors import ConflictError
from social.models import Album, Artist, Comment, Post, Track
from social.posts import create_post
from social.threads import create_comment

User = get_user_model()

CATALOGUE = {
    'Radiohead': ('OK Computer', ['Airbag', 'Paranoid Android', 'Karma Police']),
    'Massive Attack': ('Mezzanine', ['Angel', 'Teardrop', 'Inertia Creeps']),
    'Portishead': ('Dummy', ['Mysterons', 'Sour Times', 'Glory Box']),
    'Bjork': ('Homogenic', ['Hunter', 'Joga', 'Bachelorette']),
}


class Command(BaseCommand):
    help = 'Seed the database with sample data for testing'

    def add_arguments(self, parser):
        parser.add_argument(
            '--users',
            type=int,
            default=10,
            help='Number of users to create'
        )
        parser.add_argument(
            '--posts',
            type=int,
            default=20,
            help='Number of posts to create'
        )
        parser.add_argument(
            '--comments',
            type=int,
            default=100,
            help='Number of comments to create'
        )
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before seeding'
        )

    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            Comment.objects.all().delete()
            Post.objects.all().delete()
            Track.objects.all().delete()
            Album.objects.all().delete()
            Artist.objects.all().delete()
            User.objects.filter(is_superuser=False).delete()

        self.stdout.write('Creating catalogue...')
        entities = self._create_catalogue()

        self.stdout.write('Creating users...')
        users = self._create_users(options['users'])

        self.stdout.write('Creating follows...')
        self._create_follows(users, entities)

        self.stdout.write('Creating posts...')
        posts = self._create_posts(users, entities, options['posts'])

        self.stdout.write('Creating comments...')
        comments = self._create_comments(users, posts, options['comments'])

        self.stdout.write('Creating reactions...')
        self._create_reactions(users, entities, posts, comments)

        self.stdout.write(self.style.SUCCESS(
            f'Successfully created:\n'
            f'  - {len(entities)} artists/albums/tracks\n'
            f'  - {len(users)} users\n'
            f'  - {len(posts)} posts\n'
            f'  - {len(comments)} comments\n'
            f'  - Follows, likes and dislikes'
        ))

    def _create_catalogue(self):
        entities = []
        for number, (name, (album_title, track_titles)) in enumerate(CATALOGUE.items()):
            artist, _ = Artist.objects.get_or_create(name=name)
            album, _ = Album.objects.get_or_create(title=album_title)
            album.artists.add(artist)
            entities += [('ARTIST', artist), ('ALBUM', album)]
            for track_number, title in enumerate(track_titles, start=1):
                track, _ = Track.objects.get_or_create(
                    title=title,
                    album=album,
                    defaults={'track_number': track_number, 'duration': 240000 + number}
                )
                track.artists.add(artist)
                entities.append(('TRACK', track))
        return entities

    def _create_users(self, count):
        users = []
        for i in range(count):
            username = f'user{i+1}'
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(
                    username=username,
                    email=f'{username}@example.com',
                    password='password123'
                )
            users.append(user)
        return users

    def _create_follows(self, users, entities):
        artists = [entity for kind, entity in entities if kind == 'ARTIST']
        for user in users:
            for other in random.sample(users, k=min(3, len(users))):
                if other.id != user.id:
                    self._quietly(follow_user, user.id, other.id)
            self._quietly(follow_artist, user.id, random.choice(artists).id)

    def _create_posts(self, users, entities, count):
        titles = [
            "First listen thoughts",
            "Underrated, change my mind",
            "Best track on the record?",
            "Live version hits different",
            "Ten years later",
        ]
        posts = []
        for i in range(count):
            kind, entity = random.choice(entities)
            post, _, _ = create_post(
                random.choice(users).id,
                f"{random.choice(titles)} #{i+1}",
                kind,
                entity.id,
                'TEXT',
                f"Post #{i+1} about {entity}."
            )
            posts.append(post)
        return posts

    def _create_comments(self, users, posts, count):
        comment_texts = [
            "Great point! I totally agree.",
            "Hmm, I'm not sure about this...",
            "Thanks for sharing!",
            "Can you elaborate on this?",
            "This deserves more attention.",
        ]
        comments = []
        for _ in range(count):
            post = random.choice(posts)

            # 30% chance of being a reply to existing comment
            parent_id = None
            existing = [c for c in comments if c.post_id == post.id]
            if existing and random.random() < 0.3:
                parent_id = random.choice(existing).id

            comment, _, _ = create_comment(
                post.id,
                random.choice(users).id,
                random.choice(comment_texts),
                parent_id
            )
            comments.append(comment)
        return comments

    def _create_reactions(self, users, entities, posts, comments):
        for post in posts:
            for user in random.sample(users, k=len(users) // 2):
                reaction = like_post if random.random() < 0.8 else dislike_post
                self._quietly(reaction, user.id, post.id)

        for comment in comments:
            if random.random() < 0.3:
                for user in random.sample(users, k=min(3, len(users))):
                    self._quietly(like_comment, user.id, comment.id)

        for kind, entity in entities:
            operation = {'ALBUM': like_album, 'TRACK': like_track}.get(kind)
            if operation is not None:
                self._quietly(operation, random.choice(users).id, entity.id)

    @staticmethod
    def _quietly(operation, *args):
        # Random picks repeat; an existing edge is fine
        try:
            operation(*args)
        except ConflictError:
            pass
