from django.conf import settings
from django.contrib.auth.models import update_last_login
from django.db import transaction

from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import permissions, serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from apps.authentication.serializers import (
    UserLoginSerializer,
    UserRegistrationSerializer,
    UserSerializer,
)
from apps.logging.services import LoggerService, get_client_ip

TokenPairResponse = inline_serializer(
    name="TokenPairResponse",
    fields={
        "access": serializers.CharField(help_text="JWT access token"),
        "refresh": serializers.CharField(help_text="JWT refresh token"),
        "user": UserSerializer(),
    },
)


def _token_payload(user):
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
        "user": UserSerializer(user).data,
    }


def _set_auth_cookie(response, access_token):
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        access_token,
        max_age=int(settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"].total_seconds()),
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
    )


@extend_schema(tags=["Authentication"])
class AuthViewSet(viewsets.GenericViewSet):
    """
    Registration, login and logout. Login answers with a token pair and also
    sets the access token as an HttpOnly cookie for browser clients.
    """

    permission_classes = [permissions.AllowAny]
    serializer_class = UserSerializer

    @extend_schema(
        operation_id="auth_register",
        summary="User Registration",
        description="Register a new account and receive a token pair.",
        request=UserRegistrationSerializer,
        responses={201: TokenPairResponse},
    )
    @action(detail=False, methods=["post"], url_path="register")
    @transaction.atomic
    def register(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        LoggerService.log_info(
            action="user_registered",
            user=user,
            ip_address=get_client_ip(request),
            details={"email": user.email, "role": user.role},
            action_type="authentication",
        )

        payload = _token_payload(user)
        response = Response(payload, status=status.HTTP_201_CREATED)
        _set_auth_cookie(response, payload["access"])
        return response

    @extend_schema(
        operation_id="auth_login",
        summary="User Login",
        description="Authenticate with email and password.",
        request=UserLoginSerializer,
        responses={200: TokenPairResponse},
    )
    @action(detail=False, methods=["post"], url_path="login")
    def login(self, request):
        serializer = UserLoginSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        update_last_login(None, user)

        payload = _token_payload(user)

        LoggerService.log_info(
            action="user_login",
            user=user,
            ip_address=get_client_ip(request),
            details={"user_agent": request.META.get("HTTP_USER_AGENT", "")},
            action_type="authentication",
        )

        response = Response(payload, status=status.HTTP_200_OK)
        _set_auth_cookie(response, payload["access"])
        return response

    @extend_schema(
        operation_id="auth_logout",
        summary="User Logout",
        description="Blacklist the refresh token (if given) and clear the auth cookie.",
        request=inline_serializer(
            name="LogoutRequest",
            fields={
                "refresh": serializers.CharField(
                    required=False, help_text="JWT refresh token to blacklist"
                )
            },
        ),
        responses={
            200: inline_serializer(
                name="LogoutResponse", fields={"message": serializers.CharField()}
            )
        },
    )
    @action(
        detail=False,
        methods=["post"],
        permission_classes=[permissions.IsAuthenticated],
        url_path="logout",
    )
    def logout(self, request):
        refresh_token = request.data.get("refresh")
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as e:
                LoggerService.log_warning(
                    action="logout_invalid_refresh_token",
                    user=request.user,
                    ip_address=get_client_ip(request),
                    details={"error": str(e)},
                )

        LoggerService.log_info(
            action="user_logout",
            user=request.user,
            ip_address=get_client_ip(request),
            action_type="authentication",
        )

        response = Response({"message": "Logged out successfully"}, status=status.HTTP_200_OK)
        response.delete_cookie(settings.AUTH_COOKIE_NAME, samesite=settings.AUTH_COOKIE_SAMESITE)
        return response
