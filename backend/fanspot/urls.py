"""
Fanspot URL Configuration
"""
from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def api_root(request):
    """Root endpoint with API information."""
    return JsonResponse({
        'message': 'Fanspot API Server',
        'version': '1.0',
        'endpoints': {
            'feed': '/api/feed/',
            'posts': '/api/posts/<id>/',
            'comments': '/api/comments/<id>/',
            'users': '/api/users/<id>/',
            'follow': '/api/<users|artists|albums|tracks>/<id>/follow/',
            'like': '/api/<posts|comments|artists|albums|tracks>/<id>/like/',
            'dislike': '/api/<posts|comments>/<id>/dislike/',
            'auth': '/api/auth/',
        },
        'admin': '/admin/',
    })


urlpatterns = [
    path('', api_root, name='api-root'),
    path('admin/', admin.site.urls),
    path('api/', include('social.urls')),
]
