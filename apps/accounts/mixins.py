from rest_framework.permissions import AllowAny

from .authentication import OptionalJWTAuthentication


class PublicActionsMixin:
    """
    Viewset mixin for per-action access rules.

    Actions listed in ``public_actions`` resolve the user from a token when
    one is valid and skip permission checks. ``action_permissions`` maps other
    actions to their own permission classes; anything else keeps the
    viewset's ``permission_classes``.
    """
    public_actions = ()
    action_permissions = {}

    def _requested_action(self):
        action_map = getattr(self, 'action_map', None) or {}
        request = getattr(self, 'request', None)
        if request is None:
            return None
        return action_map.get(request.method.lower())

    def get_authenticators(self):
        if self._requested_action() in self.public_actions:
            return [OptionalJWTAuthentication()]
        return super().get_authenticators()

    def get_permissions(self):
        if self.action in self.public_actions:
            return [AllowAny()]
        if self.action in self.action_permissions:
            return [permission() for permission in self.action_permissions[self.action]]
        return super().get_permissions()
