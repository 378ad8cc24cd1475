from django.urls import include, path

from drf_spectacular.utils import extend_schema
from rest_framework.routers import DefaultRouter, SimpleRouter
from rest_framework_simplejwt.views import TokenRefreshView

from .viewsets import AuthViewSet, UserViewSet


class CustomTokenRefreshView(TokenRefreshView):
    """Wraps SimpleJWT TokenRefreshView with proper Swagger documentation"""

    @extend_schema(
        tags=["Authentication"],
        operation_id="auth_token_refresh",
        summary="Refresh JWT Token",
        description="Obtain a new access token using a valid refresh token",
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


auth_router = SimpleRouter()
auth_router.register(r"", AuthViewSet, basename="auth")

users_router = DefaultRouter()
users_router.register(r"users", UserViewSet, basename="users")

urlpatterns = [
    path("auth/token/refresh/", CustomTokenRefreshView.as_view(), name="token_refresh"),
    path("auth/", include(auth_router.urls)),
    path("", include(users_router.urls)),
]
