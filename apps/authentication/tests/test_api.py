"""
Tests for authentication API endpoints.
"""
from django.conf import settings
from django.urls import reverse

import pytest
from rest_framework import status
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken
from rest_framework_simplejwt.tokens import RefreshToken

from apps.authentication.models import User
from apps.authentication.tests.factories import UserFactory
from apps.logging.models import SystemLog


def registration_data(**overrides):
    data = {
        "email": "NewUser@Example.com",
        "username": "newuser",
        "password": "SecurePass123!",
        "password_confirm": "SecurePass123!",
        "first_name": "John",
        "last_name": "Doe",
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
@pytest.mark.api
class TestUserRegistration:
    """Test user registration endpoint."""

    def test_register_user_success(self, api_client):
        """Test successful user registration."""
        response = api_client.post(reverse("auth-register"), registration_data(), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        user = User.objects.get(email="newuser@example.com")
        assert user.role == User.ROLE_TEAM_MEMBER
        assert "access" in response.data
        assert "refresh" in response.data
        assert response.data["user"]["email"] == "newuser@example.com"
        assert settings.AUTH_COOKIE_NAME in response.cookies

    def test_register_with_role(self, api_client):
        response = api_client.post(
            reverse("auth-register"), registration_data(role="manager"), format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["user"]["role"] == "manager"

    def test_register_user_password_mismatch(self, api_client):
        """Test registration with password mismatch."""
        response = api_client.post(
            reverse("auth-register"),
            registration_data(password_confirm="DifferentPass456!"),
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "password_confirm" in response.data["error"]["fields"]
        assert not User.objects.filter(email="newuser@example.com").exists()

    def test_register_duplicate_email(self, api_client):
        """Test registration with existing email."""
        UserFactory(email="newuser@example.com")

        response = api_client.post(reverse("auth-register"), registration_data(), format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "email" in response.data["error"]["fields"]


@pytest.mark.django_db
@pytest.mark.api
class TestUserLogin:
    """Test login and logout endpoints."""

    def test_login_success(self, api_client):
        """Test successful login sets the auth cookie."""
        user = UserFactory(email="login@example.com")

        response = api_client.post(
            reverse("auth-login"),
            {"email": "login@example.com", "password": "testpass123"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["user"]["id"] == user.id
        cookie = response.cookies[settings.AUTH_COOKIE_NAME]
        assert cookie.value == response.data["access"]
        assert cookie["httponly"]
        user.refresh_from_db()
        assert user.last_login is not None
        assert SystemLog.objects.filter(action="user_login", user=user).exists()

    def test_login_invalid_credentials(self, api_client):
        """Test login with wrong password."""
        UserFactory(email="login@example.com")

        response = api_client.post(
            reverse("auth-login"),
            {"email": "login@example.com", "password": "wrongpassword"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["error"]["code"] == "not_authenticated"

    def test_login_inactive_user(self, api_client):
        UserFactory(email="inactive@example.com", is_active=False)

        response = api_client.post(
            reverse("auth-login"),
            {"email": "inactive@example.com", "password": "testpass123"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_blacklists_refresh_token(self, api_client):
        user = UserFactory()
        refresh = RefreshToken.for_user(user)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")

        response = api_client.post(reverse("auth-logout"), {"refresh": str(refresh)}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert BlacklistedToken.objects.filter(token__jti=refresh["jti"]).exists()
        assert response.cookies[settings.AUTH_COOKIE_NAME].value == ""

    def test_logout_with_bad_refresh_token_still_logs_out(self, api_client):
        user = UserFactory()
        api_client.force_authenticate(user=user)

        response = api_client.post(reverse("auth-logout"), {"refresh": "garbage"}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert SystemLog.objects.filter(action="logout_invalid_refresh_token").exists()

    def test_logout_requires_authentication(self, api_client):
        response = api_client.post(reverse("auth-logout"), {}, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_refresh(self, api_client):
        refresh = RefreshToken.for_user(UserFactory())

        response = api_client.post(reverse("token_refresh"), {"refresh": str(refresh)}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data
