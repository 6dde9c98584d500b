"""
Role checks.

Roles are Django auth groups named after the role (``admin``,
``ecommerce``, ``driver``, ``hr``). Superusers always count as admin.
"""
from rest_framework.permissions import BasePermission

ROLE_ADMIN = 'admin'
ROLE_ECOMMERCE = 'ecommerce'
ROLE_DRIVER = 'driver'
ROLE_HR = 'hr'

ROLES = (ROLE_ADMIN, ROLE_ECOMMERCE, ROLE_HR, ROLE_DRIVER)


def user_roles(user):
    if not user or not user.is_authenticated:
        return set()
    roles = set(user.groups.filter(name__in=ROLES).values_list('name', flat=True))
    if user.is_superuser:
        roles.add(ROLE_ADMIN)
    return roles


def user_role(user):
    """Primary role of ``user``, or None when no role group is assigned."""
    roles = user_roles(user)
    for role in ROLES:
        if role in roles:
            return role
    return None


def user_has_role(user, *roles):
    return bool(user_roles(user) & set(roles))


class HasRole(BasePermission):
    """Allow authenticated users holding one of ``allowed_roles``."""
    allowed_roles = ()
    message = 'You do not have a role permitted to perform this action.'

    def get_allowed_roles(self, view):
        return getattr(view, 'allowed_roles', None) or self.allowed_roles

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user_has_role(user, *self.get_allowed_roles(view))


def role_required(*roles):
    """Build a ``HasRole`` subclass bound to ``roles``."""
    return type(f"HasRole_{'_'.join(roles)}", (HasRole,), {'allowed_roles': tuple(roles)})


IsAdmin = role_required(ROLE_ADMIN)
IsAdminOrHR = role_required(ROLE_ADMIN, ROLE_HR)
IsOperations = role_required(ROLE_ADMIN, ROLE_ECOMMERCE)
