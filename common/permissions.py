"""
Permission classes shared across apps.

Administration is a role on the authenticated user (``is_staff`` or
``is_superuser``) rather than a shared secret.
"""
from rest_framework.permissions import BasePermission


class IsEventAdmin(BasePermission):
    """Allow access only to staff users."""

    message = "Admin privileges required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and (user.is_staff or user.is_superuser))


class IsRegistrationOwner(BasePermission):
    """Object-level check: the registration belongs to the caller."""

    message = "Unauthorized to access this registration"

    def has_object_permission(self, request, view, obj):
        return obj.user_id == request.user.id
