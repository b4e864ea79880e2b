"""
Django Admin Configuration for Social Models

Edge lists are read-only here: editing one side by hand would break the
mirror on the other side. Use the API or the services instead, and
`manage.py reconcile_edges` to repair rows edited elsewhere.
"""
from django.contrib import admin

from .models import Album, Artist, Comment, Post, Profile, Track


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'is_artist', 'follow_lists_public', 'created_at']
    list_filter = ['is_artist', 'follow_lists_public']
    search_fields = ['user__username', 'user__email']
    readonly_fields = [
        'following', 'followers', 'followed_artists', 'followed_albums',
        'followed_tracks', 'posts', 'comments', 'liked_posts', 'disliked_posts',
        'liked_comments', 'disliked_comments', 'liked_artists', 'liked_albums',
        'liked_tracks', 'created_at', 'updated_at',
    ]


class CatalogueAdmin(admin.ModelAdmin):
    readonly_fields = ['posts', 'likes', 'likers', 'followers']


@admin.register(Artist)
class ArtistAdmin(CatalogueAdmin):
    list_display = ['name', 'spotify_id', 'likes']
    search_fields = ['name']


@admin.register(Album)
class AlbumAdmin(CatalogueAdmin):
    list_display = ['title', 'release_date', 'likes']
    search_fields = ['title']


@admin.register(Track)
class TrackAdmin(CatalogueAdmin):
    list_display = ['title', 'album', 'track_number', 'likes']
    search_fields = ['title']


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ['title', 'poster', 'post_type', 'likes', 'dislikes', 'created_at']
    list_filter = ['post_type', 'content_type', 'created_at']
    search_fields = ['title', 'content', 'poster__user__username']
    # poster and target are mirrored in poster.posts / entity.posts
    readonly_fields = ['poster', 'post_type', 'artist', 'album', 'track',
                       'likes', 'dislikes', 'likers', 'dislikers', 'comments',
                       'created_at', 'updated_at']

    def has_add_permission(self, request):
        # Posts are created through create_post only
        return False

    def has_delete_permission(self, request, obj=None):
        # Deleting here would skip cleaning poster.posts / entity.posts
        return False


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ['id', 'post_id', 'poster', 'parent_id', 'state', 'likes', 'created_at']
    list_filter = ['state', 'created_at']
    search_fields = ['content', 'poster__user__username']
    # state only moves ACTIVE -> DELETED, through delete_comment
    readonly_fields = ['post', 'poster', 'parent', 'children', 'state',
                       'likes', 'dislikes', 'likers', 'dislikers',
                       'created_at', 'updated_at']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        # Comments are soft-deleted only
        return False
