"""Authentication endpoints: register, login, logout, and profile."""

import logging
from typing import Any

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotFound
from rest_framework.response import Response

from core.response import BaseAPIView, api_response
from .serializers import LoginSerializer, RegisterSerializer, UserDetailSerializer
from .services import TokenService

logger = logging.getLogger(__name__)

User = get_user_model()


class RegisterView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Register a new reader and return their profile."""
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return api_response(UserDetailSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Authenticate and issue a 7-day access token."""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        token = TokenService.generate_token(user)
        return api_response({"access": token, "user": UserDetailSerializer(user).data})


class LogoutView(BaseAPIView):
    """Invalidate the current access token by blocklisting its jti."""

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Blocklist the bearer access token and return 204 No Content."""
        identity = request.user
        if identity is None:
            raise AuthenticationFailed("Authentication required")

        TokenService.block_token(identity.token_id, identity.expires_at)
        logger.info("Blocklisted token %s for user %s", identity.token_id, identity.user_id)
        # 204 responses must not include a body.
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Return the current user's profile."""
        identity = request.user
        if identity is None:
            raise AuthenticationFailed("Authentication required")
        user = User.objects.filter(id=identity.user_id).first()
        if user is None:
            raise NotFound("User not found")
        return api_response(UserDetailSerializer(user).data)
