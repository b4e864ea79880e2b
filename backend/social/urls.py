"""
Social App URL Configuration
"""
from django.urls import path

from .views import (
    CommentCreateView,
    CommentDetailView,
    FeedView,
    FollowListView,
    FollowView,
    MockAuthView,
    PostCreateView,
    PostDetailView,
    PrivacyView,
    ReactionView,
    UserDetailView,
    UserPostsView,
    WhoAmIView,
)

urlpatterns = [
    # Feed
    path('feed/', FeedView.as_view(), name='feed'),

    # Posts
    path('posts/', PostCreateView.as_view(), name='post-create'),
    path('posts/<int:post_id>/', PostDetailView.as_view(), name='post-detail'),
    path('posts/<int:post_id>/comments/', CommentCreateView.as_view(), name='comment-create'),
    path('posts/<int:target_id>/like/',
         ReactionView.as_view(kind='post', reaction='like'), name='like-post'),
    path('posts/<int:target_id>/dislike/',
         ReactionView.as_view(kind='post', reaction='dislike'), name='dislike-post'),

    # Comments
    path('comments/<int:comment_id>/', CommentDetailView.as_view(), name='comment-detail'),
    path('comments/<int:target_id>/like/',
         ReactionView.as_view(kind='comment', reaction='like'), name='like-comment'),
    path('comments/<int:target_id>/dislike/',
         ReactionView.as_view(kind='comment', reaction='dislike'), name='dislike-comment'),

    # Users
    path('users/<int:user_id>/', UserDetailView.as_view(), name='user-detail'),
    path('users/<int:target_id>/follow/', FollowView.as_view(kind='user'), name='follow-user'),
    path('users/<int:user_id>/followers/',
         FollowListView.as_view(direction='followers'), name='user-followers'),
    path('users/<int:user_id>/following/',
         FollowListView.as_view(direction='following'), name='user-following'),
    path('users/<int:user_id>/posts/', UserPostsView.as_view(), name='user-posts'),
    path('users/<int:user_id>/privacy/', PrivacyView.as_view(), name='user-privacy'),

    # Catalogue
    path('artists/<int:target_id>/follow/', FollowView.as_view(kind='artist'), name='follow-artist'),
    path('albums/<int:target_id>/follow/', FollowView.as_view(kind='album'), name='follow-album'),
    path('tracks/<int:target_id>/follow/', FollowView.as_view(kind='track'), name='follow-track'),
    path('artists/<int:target_id>/like/',
         ReactionView.as_view(kind='artist'), name='like-artist'),
    path('albums/<int:target_id>/like/',
         ReactionView.as_view(kind='album'), name='like-album'),
    path('tracks/<int:target_id>/like/',
         ReactionView.as_view(kind='track'), name='like-track'),

    # Auth (development)
    path('auth/mock-login/', MockAuthView.as_view(), name='mock-login'),
    path('auth/whoami/', WhoAmIView.as_view(), name='whoami'),
]
