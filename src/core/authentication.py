"""Authentication helpers that bridge the JWT middleware into DRF.

Bearer tokens are verified once, in ``JWTAuthMiddleware``, which attaches the
resulting ``Identity`` (or None) to the Django request. This authenticator
surfaces that identity as DRF's ``request.user`` without re-parsing anything.
"""

from typing import Any, Optional, Tuple

from rest_framework.authentication import BaseAuthentication


class MiddlewareIdentityAuthentication(BaseAuthentication):
    """Expose ``request._request.identity`` (set by middleware) to DRF.

    Anonymous requests are not an error here; views and permissions decide
    whether an identity is required.
    """

    def authenticate(self, request) -> Optional[Tuple[Any, None]]:
        # DRF's Request wraps the original Django HttpRequest as ``._request``.
        django_request = getattr(request, "_request", None)
        if django_request is None:
            return None

        identity = getattr(django_request, "identity", None)
        if identity is None:
            return None

        return identity, None

    def authenticate_header(self, request) -> str:
        """Make DRF answer unauthenticated requests with 401 rather than 403."""
        return 'Bearer realm="api"'


__all__ = ["MiddlewareIdentityAuthentication"]
