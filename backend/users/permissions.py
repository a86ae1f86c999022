# users/permissions.py
from rest_framework.permissions import BasePermission


class IsAuthenticatedOrRedirect(BasePermission):
    """
    Guards a protected endpoint behind a valid session.
    Anonymous requests are rejected with a 401 that points at the sign-in view;
    the rejection never carries any of the protected payload.
    """
    message = "Authentication required."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)


class IsAdminProfile(IsAuthenticatedOrRedirect):
    """Allows access only to users whose profile has the admin role."""
    message = "Administrator access required."

    def has_permission(self, request, view):
        return super().has_permission(request, view) and request.user.is_admin()
