"""
Tests for header and cookie JWT authentication.
"""
from django.conf import settings
from django.urls import reverse

import pytest
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken

from apps.authentication.tests.factories import UserFactory


@pytest.mark.django_db
class TestCookieJWTAuthentication:
    def test_bearer_header(self, api_client):
        user = UserFactory()
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

        response = api_client.get(reverse("users-me"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == user.id

    def test_cookie_without_header(self, api_client):
        user = UserFactory()
        api_client.cookies[settings.AUTH_COOKIE_NAME] = str(AccessToken.for_user(user))

        response = api_client.get(reverse("users-me"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == user.id

    def test_header_wins_over_cookie(self, api_client):
        header_user = UserFactory()
        cookie_user = UserFactory()
        api_client.cookies[settings.AUTH_COOKIE_NAME] = str(AccessToken.for_user(cookie_user))
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(header_user)}")

        response = api_client.get(reverse("users-me"))

        assert response.data["id"] == header_user.id

    def test_malformed_token_is_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not.a.token")

        response = api_client.get(reverse("users-me"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["error"]["code"] == "not_authenticated"

    def test_expired_token_is_401(self, api_client):
        token = AccessToken.for_user(UserFactory())
        token.set_exp(lifetime=-settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"])
        api_client.cookies[settings.AUTH_COOKIE_NAME] = str(token)

        response = api_client.get(reverse("users-me"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_for_deleted_user_is_401(self, api_client):
        user = UserFactory()
        token = AccessToken.for_user(user)
        user.delete()
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.get(reverse("users-me"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_for_inactive_user_is_401(self, api_client):
        user = UserFactory()
        token = AccessToken.for_user(user)
        user.is_active = False
        user.save()
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.get(reverse("users-me"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_no_credentials_is_401(self, api_client):
        response = api_client.get(reverse("users-me"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
