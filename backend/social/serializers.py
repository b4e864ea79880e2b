"""
DRF Serializers
===============

Serializers handle:
1. Validation of incoming data (create post, create comment)
2. Transformation of rows to JSON, including the raw id lists
3. Nested comment tree serialization

DESIGN DECISIONS:
-----------------
1. Id lists are returned as-is; clients resolve ids they care about
2. Deleted comments keep their place in the tree but lose their content
3. Input serializers are plain Serializers; the services own the writes
"""

from rest_framework import serializers

from .models import Album, Artist, Comment, Post, PostContentType, PostType, Profile, Track


class UserSummarySerializer(serializers.ModelSerializer):
    """Minimal user representation for embedding in other objects."""
    id = serializers.IntegerField(source='pk', read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)

    class Meta:
        model = Profile
        fields = ['id', 'username', 'profile_picture_url']
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):
    """Full profile document, also used as the cached user snapshot."""
    id = serializers.IntegerField(source='pk', read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)

    class Meta:
        model = Profile
        fields = [
            'id',
            'username',
            'profile_picture_url',
            'is_artist',
            'follow_lists_public',
            'following',
            'followers',
            'followed_artists',
            'followed_albums',
            'followed_tracks',
            'posts',
            'comments',
            'liked_posts',
            'disliked_posts',
            'liked_comments',
            'disliked_comments',
            'liked_artists',
            'liked_albums',
            'liked_tracks',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ArtistSerializer(serializers.ModelSerializer):
    class Meta:
        model = Artist
        fields = [
            'id', 'name', 'spotify_id', 'biography', 'profile_picture_url',
            'genres', 'posts', 'likes', 'likers', 'followers'
        ]
        read_only_fields = fields


class AlbumSerializer(serializers.ModelSerializer):
    class Meta:
        model = Album
        fields = [
            'id', 'title', 'description', 'cover', 'release_date', 'artists',
            'posts', 'likes', 'likers', 'followers'
        ]
        read_only_fields = fields


class TrackSerializer(serializers.ModelSerializer):
    class Meta:
        model = Track
        fields = [
            'id', 'title', 'spotify_id', 'explicit', 'disc_number',
            'track_number', 'duration', 'album', 'artists',
            'posts', 'likes', 'likers', 'followers'
        ]
        read_only_fields = fields


ENTITY_SERIALIZERS = {
    Artist: ArtistSerializer,
    Album: AlbumSerializer,
    Track: TrackSerializer,
    Profile: ProfileSerializer,
}


def serialize_entity(instance):
    """Serialize an artist, album, track or profile by its model."""
    return ENTITY_SERIALIZERS[type(instance)](instance).data


class PostSerializer(serializers.ModelSerializer):
    """
    Post without its comment tree.

    Uses select_related('poster__user') in the queries.
    """
    poster = UserSummarySerializer(read_only=True)

    class Meta:
        model = Post
        fields = [
            'id',
            'poster',
            'title',
            'post_type',
            'artist',
            'album',
            'track',
            'content_type',
            'content',
            'likes',
            'dislikes',
            'likers',
            'dislikers',
            'comments',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PostCreateSerializer(serializers.Serializer):
    """
    Input for creating posts.

    Poster is taken from request.user in the view, not from input.
    post_type / content_type are accepted in any case ('artist', 'ARTIST').
    """
    title = serializers.CharField(max_length=300)
    post_type = serializers.CharField()
    entity_id = serializers.IntegerField(min_value=1)
    content_type = serializers.CharField(required=False, default=PostContentType.TEXT)
    content = serializers.CharField()

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title cannot be empty.")
        return value.strip()

    def validate_post_type(self, value):
        value = value.upper()
        if value not in PostType.values:
            raise serializers.ValidationError(
                f"Post type must be one of: {', '.join(PostType.values)}."
            )
        return value

    def validate_content_type(self, value):
        value = value.upper()
        if value not in PostContentType.values:
            raise serializers.ValidationError(
                f"Content type must be one of: {', '.join(PostContentType.values)}."
            )
        return value


class CommentSerializer(serializers.ModelSerializer):
    """
    Serializer for individual comments.

    NOTE: This does NOT include nested replies!
    Tree structure is handled by CommentTreeSerializer.
    """
    poster = UserSummarySerializer(read_only=True)
    content = serializers.SerializerMethodField()
    is_deleted = serializers.BooleanField(read_only=True)

    class Meta:
        model = Comment
        fields = [
            'id',
            'post',
            'poster',
            'content',
            'parent',
            'children',
            'likes',
            'dislikes',
            'likers',
            'dislikers',
            'is_deleted',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_content(self, obj):
        # Tombstones stay in the tree without their text
        if obj.is_deleted:
            return None
        return obj.content


class PrivacySerializer(serializers.Serializer):
    follow_lists_public = serializers.BooleanField()


class CommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField()
    parent = serializers.IntegerField(required=False, allow_null=True, default=None)

    def validate_content(self, value):
        if not value.strip():
            raise serializers.ValidationError("Comment cannot be empty.")
        return value.strip()


class CommentTreeSerializer(serializers.Serializer):
    """
    Serializer for nested comment tree.

    Serializes the pre-built structure from queries.build_comment_tree():
    {
        "comment": { ...comment data... },
        "replies": [ ...nested CommentTreeSerializer... ]
    }
    """
    comment = CommentSerializer()
    replies = serializers.SerializerMethodField()

    def get_replies(self, obj):
        return CommentTreeSerializer(obj['replies'], many=True).data


class PostDetailSerializer(PostSerializer):
    """
    Post with nested comments.

    Comments are passed as pre-built tree in context.
    """
    comment_tree = serializers.SerializerMethodField()

    class Meta(PostSerializer.Meta):
        fields = PostSerializer.Meta.fields + ['comment_tree']
        read_only_fields = fields

    def get_comment_tree(self, obj):
        comment_tree = self.context.get('comment_tree', [])
        return CommentTreeSerializer(comment_tree, many=True).data
