"""
Data Models for Fanspot
=======================

Design Philosophy:
------------------
1. Relationships are stored as mirrored id lists on BOTH endpoints
   - user.following <-> other_user.followers
   - user.liked_posts <-> post.likers
   - post.comments, parent_comment.children, user.posts, artist.posts
   - Each list is a JSON column of integer primary keys with set semantics
   - Trade-off: Reads of "who follows X" are a single row fetch, but every
     edge write touches two rows. The services in edges.py, threads.py and
     posts.py are the only code allowed to change these lists.

2. Counters (likes/dislikes) are denormalized next to their lists
   - likes == len(likers), dislikes == len(dislikers) after every operation
   - Services recompute the counter from the list, never increment blindly

3. Comments are never hard-deleted
   - state moves ACTIVE -> DELETED and the row stays as a tombstone
   - parent/children lists are untouched, so replies keep their anchor

4. Comment.post and Comment.parent carry no database constraint
   - Deleting a post does not cascade to its comments (they stay stored)

Profile:
--------
Django's built-in User handles credentials. Profile holds the social graph
and shares the User's primary key, so a user id IS a profile id everywhere
in the edge lists.
"""

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone


def id_list():
    return []


class Profile(models.Model):
    """
    Social side of a user account.

    Created automatically by signals.create_profile when a User is created.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='profile'
    )
    profile_picture_url = models.URLField(blank=True, default='')
    is_artist = models.BooleanField(default=False)
    # Privacy: when False only the owner can read follower/following lists
    follow_lists_public = models.BooleanField(default=False)

    following = models.JSONField(default=id_list, blank=True)
    followers = models.JSONField(default=id_list, blank=True)
    followed_artists = models.JSONField(default=id_list, blank=True)
    followed_albums = models.JSONField(default=id_list, blank=True)
    followed_tracks = models.JSONField(default=id_list, blank=True)

    posts = models.JSONField(default=id_list, blank=True)
    comments = models.JSONField(default=id_list, blank=True)

    liked_posts = models.JSONField(default=id_list, blank=True)
    disliked_posts = models.JSONField(default=id_list, blank=True)
    liked_comments = models.JSONField(default=id_list, blank=True)
    disliked_comments = models.JSONField(default=id_list, blank=True)
    liked_artists = models.JSONField(default=id_list, blank=True)
    liked_albums = models.JSONField(default=id_list, blank=True)
    liked_tracks = models.JSONField(default=id_list, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.user.username

    @property
    def username(self):
        return self.user.username


class Artist(models.Model):
    name = models.CharField(max_length=200, unique=True)
    spotify_id = models.CharField(max_length=64, blank=True, null=True)
    biography = models.TextField(blank=True, default='')
    profile_picture_url = models.URLField(blank=True, default='')
    genres = models.JSONField(default=id_list, blank=True)

    posts = models.JSONField(default=id_list, blank=True)
    likes = models.PositiveIntegerField(default=0)
    likers = models.JSONField(default=id_list, blank=True)
    followers = models.JSONField(default=id_list, blank=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Album(models.Model):
    title = models.CharField(max_length=300)
    description = models.TextField(blank=True, default='')
    cover = models.URLField(blank=True, default='')
    release_date = models.DateField(null=True, blank=True)
    artists = models.ManyToManyField(Artist, related_name='albums', blank=True)

    posts = models.JSONField(default=id_list, blank=True)
    likes = models.PositiveIntegerField(default=0)
    likers = models.JSONField(default=id_list, blank=True)
    followers = models.JSONField(default=id_list, blank=True)

    def __str__(self):
        return self.title


class Track(models.Model):
    title = models.CharField(max_length=300)
    spotify_id = models.CharField(max_length=64, blank=True, null=True)
    description = models.TextField(blank=True, default='')
    explicit = models.BooleanField(default=False)
    disc_number = models.PositiveSmallIntegerField(default=1)
    track_number = models.PositiveSmallIntegerField(default=1)
    # Duration in milliseconds
    duration = models.PositiveIntegerField(default=0)
    album = models.ForeignKey(
        Album,
        on_delete=models.CASCADE,
        related_name='tracks',
        null=True,
        blank=True
    )
    artists = models.ManyToManyField(Artist, related_name='tracks', blank=True)

    posts = models.JSONField(default=id_list, blank=True)
    likes = models.PositiveIntegerField(default=0)
    likers = models.JSONField(default=id_list, blank=True)
    followers = models.JSONField(default=id_list, blank=True)

    def __str__(self):
        return self.title


class PostType(models.TextChoices):
    ARTIST = 'ARTIST', 'Artist'
    ALBUM = 'ALBUM', 'Album'
    TRACK = 'TRACK', 'Track'


class PostContentType(models.TextChoices):
    TEXT = 'TEXT', 'Text'
    MEDIA = 'MEDIA', 'Media'


class Post(models.Model):
    """
    A post written "under" exactly one artist, album or track.

    post_type tags which of artist/album/track is set; the check constraint
    below rejects any row where the tag and the populated column disagree.
    """
    poster = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        db_index=True  # For fetching user's posts
    )
    title = models.CharField(max_length=300)
    post_type = models.CharField(max_length=10, choices=PostType.choices)
    artist = models.ForeignKey(Artist, on_delete=models.PROTECT, null=True, blank=True)
    album = models.ForeignKey(Album, on_delete=models.PROTECT, null=True, blank=True)
    track = models.ForeignKey(Track, on_delete=models.PROTECT, null=True, blank=True)
    content_type = models.CharField(
        max_length=10,
        choices=PostContentType.choices,
        default=PostContentType.TEXT
    )
    content = models.TextField()

    likes = models.PositiveIntegerField(default=0)
    dislikes = models.PositiveIntegerField(default=0)
    likers = models.JSONField(default=id_list, blank=True)
    dislikers = models.JSONField(default=id_list, blank=True)
    comments = models.JSONField(default=id_list, blank=True)

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True  # For feed ordering - critical for cursor pagination
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(post_type=PostType.ARTIST, artist__isnull=False,
                      album__isnull=True, track__isnull=True)
                    | Q(post_type=PostType.ALBUM, artist__isnull=True,
                        album__isnull=False, track__isnull=True)
                    | Q(post_type=PostType.TRACK, artist__isnull=True,
                        album__isnull=True, track__isnull=False)
                ),
                name='post_has_exactly_one_target'
            ),
        ]

    def __str__(self):
        return f"{self.title[:50]} ({self.post_type})"

    @property
    def target_id(self):
        return self.artist_id or self.album_id or self.track_id


class CommentState(models.TextChoices):
    """One-way lifecycle: ACTIVE -> DELETED. No resurrection."""
    ACTIVE = 'ACTIVE', 'Active'
    DELETED = 'DELETED', 'Deleted'


class Comment(models.Model):
    """
    Threaded comment using Adjacency List pattern, mirrored both ways.

    parent points up, parent.children points down. Both are written by
    threads.create_comment in the same transaction and never edited again,
    not even by delete_comment.
    """
    post = models.ForeignKey(
        Post,
        on_delete=models.DO_NOTHING,
        db_constraint=False,  # Comments outlive their post
        db_index=True
    )
    poster = models.ForeignKey(Profile, on_delete=models.CASCADE)
    content = models.TextField()

    likes = models.PositiveIntegerField(default=0)
    dislikes = models.PositiveIntegerField(default=0)
    likers = models.JSONField(default=id_list, blank=True)
    dislikers = models.JSONField(default=id_list, blank=True)

    parent = models.ForeignKey(
        'self',
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        blank=True,
        related_name='replies'
    )
    children = models.JSONField(default=id_list, blank=True)
    state = models.CharField(
        max_length=10,
        choices=CommentState.choices,
        default=CommentState.ACTIVE
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at', 'id']  # Oldest first within a thread
        indexes = [
            models.Index(fields=['post', 'created_at'], name='comment_post_created_idx'),
        ]

    def __str__(self):
        return f"Comment {self.pk} on post {self.post_id}"

    @property
    def is_deleted(self):
        return self.state == CommentState.DELETED
