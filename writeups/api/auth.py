"""
Authentication for the JSON API.

Provides @api_login_required: the session user must be logged in. Failures
are answered with JSON instead of a redirect to the login page.
"""

from functools import wraps

from django.http import JsonResponse


def api_login_required(view_func):
    """
    Decorator that requires an authenticated session.

    Usage:
        @api_login_required
        def my_view(request):
            # request.user is guaranteed to be authenticated
            pass
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse(
                {"error": "Authentication required"},
                status=401,
            )
        return view_func(request, *args, **kwargs)

    return wrapper
