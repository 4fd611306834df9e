"""DRF permission class mapping view actions to the access policy."""

from rest_framework import permissions

from .policy import Action, Element, role_may


class PolicyPermission(permissions.BasePermission):
    """Coarse, role-level gate for a view's ``policy_element``.

    Views declare ``policy_element`` and a ``policy_actions`` mapping of DRF
    action names to policy ``Action`` values. Actions absent from the mapping
    (reads) pass through; anonymous callers are rejected for mapped actions
    and DRF turns that into 401. Ownership and visibility are decided later,
    against the loaded object, by the services.
    """

    message = "You do not have permission to perform this action on this resource."

    def has_permission(self, request, view) -> bool:
        element = getattr(view, "policy_element", None)
        if not element:
            return False

        action = getattr(view, "policy_actions", {}).get(getattr(view, "action", None))
        if action is None:
            return True

        identity = getattr(request, "user", None)
        if identity is None or not getattr(identity, "is_authenticated", False):
            return False

        return role_may(identity.role, Element(element), Action(action))


__all__ = ["PolicyPermission"]
