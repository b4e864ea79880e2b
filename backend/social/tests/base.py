"""Shared fixtures for the social tests."""

from django.contrib.auth.models import User

from social.models import Album, Artist, Track
from social.posts import create_post


def make_profile(username):
    """Create an auth User and return the Profile the signal attached to it."""
    user = User.objects.create_user(username, f'{username}@test.com', 'pass')
    return user.profile


def make_catalogue():
    artist = Artist.objects.create(name='Portishead')
    album = Album.objects.create(title='Dummy')
    album.artists.add(artist)
    track = Track.objects.create(title='Glory Box', album=album, track_number=11)
    track.artists.add(artist)
    return artist, album, track


def make_post(poster, entity, post_type='ARTIST', title='Thoughts'):
    post, _, _ = create_post(poster.pk, title, post_type, entity.pk, 'TEXT', 'Content ' * 5)
    return post


def reload(*instances):
    for instance in instances:
        instance.refresh_from_db()
    return instances[0] if len(instances) == 1 else instances
