"""System checks for access policy wiring."""

from django.core.checks import Error, register

from access_control.permissions import PolicyPermission
from access_control.policy import Action, Element


@register()
def policy_views_declare_element(app_configs, **kwargs):
    """Ensure policy-gated views declare a known element and known actions."""
    errors: list[Error] = []

    # Import here to avoid circular imports at module load time.
    from engagement.views import CommentViewSet, LikeViewSet
    from news.views import NewsViewSet

    policy_views = [NewsViewSet, CommentViewSet, LikeViewSet]

    for view_cls in policy_views:
        if PolicyPermission not in getattr(view_cls, "permission_classes", []):
            continue
        element = getattr(view_cls, "policy_element", None)
        if element not in {e.value for e in Element}:
            errors.append(
                Error(
                    f"{view_cls.__name__} uses PolicyPermission but does not "
                    f"declare a valid policy_element.",
                    obj=view_cls,
                    id="access_control.E001",
                )
            )
        known_actions = {a.value for a in Action}
        for view_action, policy_action in getattr(view_cls, "policy_actions", {}).items():
            if policy_action not in known_actions:
                errors.append(
                    Error(
                        f"{view_cls.__name__}.{view_action} maps to unknown "
                        f"policy action {policy_action!r}.",
                        obj=view_cls,
                        id="access_control.E002",
                    )
                )

    return errors
