"""
DRF Views
=========

Thin HTTP layer over the services. Views validate input, call one service
function with request.user's id, and serialize what comes back. Service
errors are NOT caught here: exceptions.custom_exception_handler maps them
to 404 / 409 / 403.

AUTHENTICATION NOTE:
--------------------
Session authentication. Credentials and tokens are outside this app; for
local testing MockAuthView logs a user in by username.
"""

from django.contrib.auth import get_user_model, login
from rest_framework import generics, permissions, status
from rest_framework.pagination import CursorPagination
from rest_framework.response import Response
from rest_framework.views import APIView

from .cache import get_cached_user
from .edges import FOLLOW_OPERATIONS, REACTION_OPERATIONS
from .errors import NotFoundError
from .models import Post
from .posts import create_post, delete_post_by_id
from .profiles import set_follow_lists_public
from .queries import (
    get_all_comments_for_post,
    build_comment_tree,
    get_followers,
    get_following,
    get_post_with_poster,
    get_user_posts,
)
from .resolvers import get_comment, get_profile
from .serializers import (
    AlbumSerializer,
    ArtistSerializer,
    CommentCreateSerializer,
    CommentSerializer,
    PostCreateSerializer,
    PostDetailSerializer,
    PostSerializer,
    PrivacySerializer,
    ProfileSerializer,
    TrackSerializer,
    UserSummarySerializer,
    serialize_entity,
)
from .threads import create_comment, delete_comment

TARGET_SERIALIZERS = {
    'user': ProfileSerializer,
    'artist': ArtistSerializer,
    'album': AlbumSerializer,
    'track': TrackSerializer,
    'post': PostSerializer,
    'comment': CommentSerializer,
}

# reaction -> (past tense, undo past tense)
REACTION_WORDS = {
    'like': ('liked', 'unliked'),
    'dislike': ('disliked', 'undisliked'),
}


def mutation_response(message, code=status.HTTP_200_OK, **documents):
    return Response({'success': True, 'message': message, **documents}, status=code)


class FeedPagination(CursorPagination):
    """
    Cursor pagination for the feed.

    Trade-off: Can't jump to arbitrary page, but an index seek on
    created_at instead of an OFFSET scan.
    """
    page_size = 20
    ordering = '-created_at'
    cursor_query_param = 'cursor'


class FeedView(generics.ListAPIView):
    """
    GET /api/feed/

    Returns paginated list of posts, newest first.
    """
    serializer_class = PostSerializer
    pagination_class = FeedPagination
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        return Post.objects.select_related('poster__user').order_by('-created_at')


class FollowView(APIView):
    """
    POST   /api/<kind>/<target_id>/follow/   follow
    DELETE /api/<kind>/<target_id>/follow/   unfollow

    kind is one of user, artist, album, track (set in urls.py).
    """
    permission_classes = [permissions.IsAuthenticated]
    kind = None

    def post(self, request, target_id):
        follow, _ = FOLLOW_OPERATIONS[self.kind]
        user, target = follow(request.user.id, target_id)
        return self._respond(f'Successfully followed {self.kind}.', user, target)

    def delete(self, request, target_id):
        _, unfollow = FOLLOW_OPERATIONS[self.kind]
        user, target = unfollow(request.user.id, target_id)
        return self._respond(f'Successfully unfollowed {self.kind}.', user, target)

    def _respond(self, message, user, target):
        return mutation_response(
            message,
            user=ProfileSerializer(user).data,
            target=TARGET_SERIALIZERS[self.kind](target).data
        )


class ReactionView(APIView):
    """
    POST   /api/<kind>/<target_id>/<reaction>/   like or dislike
    DELETE /api/<kind>/<target_id>/<reaction>/   undo it

    Liking something you disliked clears the dislike (and vice versa).
    """
    permission_classes = [permissions.IsAuthenticated]
    kind = None
    reaction = 'like'

    def post(self, request, target_id):
        react, _ = REACTION_OPERATIONS[(self.kind, self.reaction)]
        user, target = react(request.user.id, target_id)
        done, _ = REACTION_WORDS[self.reaction]
        return self._respond(f'Successfully {done} the {self.kind}.', user, target)

    def delete(self, request, target_id):
        _, undo = REACTION_OPERATIONS[(self.kind, self.reaction)]
        user, target = undo(request.user.id, target_id)
        _, undone = REACTION_WORDS[self.reaction]
        return self._respond(f'Successfully {undone} the {self.kind}.', user, target)

    def _respond(self, message, user, target):
        return mutation_response(
            message,
            user=ProfileSerializer(user).data,
            target=TARGET_SERIALIZERS[self.kind](target).data
        )


class PostCreateView(APIView):
    """
    POST /api/posts/

    Body:
    {
        "title": "...",
        "post_type": "artist" | "album" | "track",
        "entity_id": 12,
        "content_type": "text" | "media",   // optional, default text
        "content": "..."
    }
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = PostCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        post, poster, entity = create_post(request.user.id, **serializer.validated_data)
        return mutation_response(
            'Post successfully created.',
            code=status.HTTP_201_CREATED,
            post=PostSerializer(post).data,
            user=ProfileSerializer(poster).data,
            target=serialize_entity(entity)
        )


class PostDetailView(APIView):
    """
    GET    /api/posts/<id>/   post with full nested comment tree
    DELETE /api/posts/<id>/   delete (poster only)

    QUERY COUNT (GET): 2
    1. Post with poster
    2. All comments with posters
    """

    def get_permissions(self):
        if self.request.method == 'GET':
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    def get(self, request, post_id):
        post = get_post_with_poster(post_id)
        if not post:
            raise NotFoundError('Post')

        comment_tree = build_comment_tree(get_all_comments_for_post(post_id))
        serializer = PostDetailSerializer(post, context={'comment_tree': comment_tree})
        return Response(serializer.data)

    def delete(self, request, post_id):
        deleted_id, poster, entity = delete_post_by_id(post_id, requester_id=request.user.id)
        return mutation_response(
            'Successfully deleted post.',
            id=deleted_id,
            user=ProfileSerializer(poster).data,
            target=serialize_entity(entity)
        )


class CommentCreateView(APIView):
    """
    POST /api/posts/<post_id>/comments/

    Body:
    {
        "content": "Comment text",
        "parent": 123  // optional, for replies
    }
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, post_id):
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        comment, post, commenter = create_comment(
            post_id,
            request.user.id,
            serializer.validated_data['content'],
            serializer.validated_data['parent']
        )
        return mutation_response(
            'Successfully created comment.',
            code=status.HTTP_201_CREATED,
            comment=CommentSerializer(comment).data,
            post=PostSerializer(post).data,
            user=ProfileSerializer(commenter).data
        )


class CommentDetailView(APIView):
    """
    GET    /api/comments/<id>/
    DELETE /api/comments/<id>/   soft delete (poster only)
    """

    def get_permissions(self):
        if self.request.method == 'GET':
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    def get(self, request, comment_id):
        return Response(CommentSerializer(get_comment(comment_id)).data)

    def delete(self, request, comment_id):
        comment = delete_comment(comment_id, request.user.id)
        return mutation_response(
            'Successfully deleted comment.',
            comment=CommentSerializer(comment).data
        )


class UserDetailView(APIView):
    """
    GET /api/users/<id>/

    Served from the user cache when warm, from the database otherwise.
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request, user_id):
        cached = get_cached_user(user_id)
        if cached is not None:
            return Response(cached)
        return Response(ProfileSerializer(get_profile(user_id)).data)


class FollowListView(APIView):
    """
    GET /api/users/<id>/followers/
    GET /api/users/<id>/following/

    Private lists (follow_lists_public=False, the default) are visible to
    their owner only; PATCH users/<id>/privacy/ makes them public.
    """
    permission_classes = [permissions.AllowAny]
    direction = 'followers'

    def get(self, request, user_id):
        viewer_id = request.user.id if request.user.is_authenticated else None
        fetch = get_followers if self.direction == 'followers' else get_following
        profiles = fetch(user_id, viewer_id)
        return Response(UserSummarySerializer(profiles, many=True).data)


class PrivacyView(APIView):
    """
    PATCH /api/users/<id>/privacy/

    Body: { "follow_lists_public": true }

    Owner only. Follow lists start private.
    """
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, user_id):
        serializer = PrivacySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = set_follow_lists_public(
            user_id,
            request.user.id,
            serializer.validated_data['follow_lists_public']
        )
        return mutation_response(
            'Successfully updated privacy settings.',
            user=ProfileSerializer(profile).data
        )


class UserPostsView(APIView):
    """GET /api/users/<id>/posts/"""
    permission_classes = [permissions.AllowAny]

    def get(self, request, user_id):
        return Response(PostSerializer(get_user_posts(user_id), many=True).data)


# ============================================================================
# DEVELOPMENT/TESTING HELPERS
# ============================================================================

class MockAuthView(APIView):
    """
    POST /api/auth/mock-login/

    DEVELOPMENT ONLY: Quick login for testing without full auth flow.
    Creates user (and profile) if it doesn't exist.

    Body: { "username": "testuser" }
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        username = request.data.get('username', 'testuser')
        user, created = get_user_model().objects.get_or_create(
            username=username,
            defaults={'email': f'{username}@example.com'}
        )
        login(request, user)

        return Response({
            'user_id': user.id,
            'username': user.username,
            'created': created
        })


class WhoAmIView(APIView):
    """
    GET /api/auth/whoami/

    Returns current authenticated user info.
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        if request.user.is_authenticated:
            return Response({
                'authenticated': True,
                'user_id': request.user.id,
                'username': request.user.username
            })
        return Response({
            'authenticated': False,
            'user_id': None,
            'username': None
        })
