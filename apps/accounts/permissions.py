from rest_framework.permissions import BasePermission

from .models import UserRole

PERMISSION_DENIED_MESSAGE = "You do not have permission to perform this action"


class RolePermission(BasePermission):
    """Allow authenticated users whose role is in ``allowed_roles``."""
    allowed_roles = ()
    message = PERMISSION_DENIED_MESSAGE

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.role in self.allowed_roles


def allow_roles(*roles, message=PERMISSION_DENIED_MESSAGE):
    """Build a permission class that admits only the given roles."""
    return type(
        'AllowRoles_' + '_'.join(roles),
        (RolePermission,),
        {'allowed_roles': tuple(roles), 'message': message},
    )


IsTourist = allow_roles(UserRole.TOURIST)
IsGuide = allow_roles(UserRole.GUIDE)
IsAdmin = allow_roles(UserRole.ADMIN)
IsGuideOrAdmin = allow_roles(UserRole.GUIDE, UserRole.ADMIN)
IsTouristOrAdmin = allow_roles(UserRole.TOURIST, UserRole.ADMIN)


class IsOwnerOrAdmin(BasePermission):
    """
    Object-level gate: the resolved owner id must be the caller's, unless the
    caller is an admin. Views name the owner attribute with ``owner_field``.
    """
    message = PERMISSION_DENIED_MESSAGE

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        if request.user.role == UserRole.ADMIN:
            return True
        owner_field = getattr(view, 'owner_field', 'id')
        return str(getattr(obj, owner_field, None)) == str(request.user.id)
