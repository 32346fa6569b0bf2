from rest_framework import permissions


class IsMenuAdmin(permissions.BasePermission):
    """
    Permission to only allow staff users to change menu content
    """
    message = 'Only menu administrators can change menu content.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_active and user.is_staff
