"""Middleware that verifies bearer tokens and checks the Redis blocklist."""

import logging
from typing import Optional

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework import status

from authentication.services import BlocklistUnavailable, TokenService

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(MiddlewareMixin):
    """Attach ``request.identity`` from a valid, non-revoked bearer token.

    A missing, invalid, expired, or blocklisted token leaves the request
    anonymous; endpoints that need an identity reject it with 401. The
    identity is taken from the token claims alone, without a user lookup.
    """

    def process_request(self, request):  # type: ignore[override]
        """Authenticate request using Bearer access token if present."""
        request.identity = None

        token = get_bearer_token(request)
        if not token:
            return None

        identity = TokenService.verify(token)
        if identity is None:
            return None

        try:
            if TokenService.is_token_blocked(identity.token_id):
                logger.debug("Ignoring blocklisted token %s", identity.token_id)
                return None
        except BlocklistUnavailable:
            logger.error("Token blocklist unavailable; refusing authenticated request")
            return _service_unavailable()

        request.identity = identity
        return None


def get_bearer_token(request) -> Optional[str]:
    """Extract the Bearer token from Authorization header if present."""
    auth_header = request.META.get("HTTP_AUTHORIZATION", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


def _service_unavailable() -> JsonResponse:
    return JsonResponse(
        {"data": None, "errors": ["Authentication service unavailable (blocklist)."]},
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


__all__ = ["JWTAuthMiddleware", "get_bearer_token"]
