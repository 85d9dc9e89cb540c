from rest_framework import permissions


class IsNotBanned(permissions.BasePermission):
    """Deny every request from a banned account"""
    message = 'Your account has been suspended'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        return not request.user.is_banned


class IsOwnerOrAdmin(permissions.BasePermission):
    """Object access for the owning user or an admin of the object's group"""

    owner_field = 'user'

    def has_object_permission(self, request, view, obj):
        user = request.user
        if user.is_superuser:
            return True

        if user.is_platform_admin:
            return getattr(obj, 'group_id', None) == user.group_id

        owner_field = getattr(view, 'owner_field', self.owner_field)
        return getattr(obj, f'{owner_field}_id', None) == user.id


class IsAdminOrReadOnly(permissions.BasePermission):
    """Read access to all authenticated users, write access only to admins"""

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        if request.method in permissions.SAFE_METHODS:
            return True

        return request.user.is_platform_admin


class IsAdmin(permissions.BasePermission):
    """Permission for admin users only"""

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        return request.user.is_platform_admin
