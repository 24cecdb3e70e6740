from .models import is_admin


def session_context(request):
    """Session-derived values every template can read without re-querying."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return {"current_profile": None, "is_admin": False}
    return {
        "current_profile": getattr(user, "profile", None),
        "is_admin": is_admin(user),
    }
