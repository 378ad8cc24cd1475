"""
JWT authentication that accepts the access token from the Authorization
header or, when no bearer header is sent, from the HttpOnly auth cookie.
"""
import logging

from django.conf import settings

from rest_framework_simplejwt.authentication import JWTAuthentication

logger = logging.getLogger(__name__)


class CookieJWTAuthentication(JWTAuthentication):
    """
    Resolves the request principal from a signed access token.

    The ``Authorization: Bearer <token>`` header wins when both credentials
    are present; the cookie named by ``AUTH_COOKIE_NAME`` is only consulted
    when the header carries no bearer token. Invalid, expired or orphaned
    tokens raise ``AuthenticationFailed``/``InvalidToken`` (HTTP 401).
    """

    def authenticate(self, request):
        raw_token = None

        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)

        if raw_token is None:
            raw_token = request.COOKIES.get(settings.AUTH_COOKIE_NAME) or None
            if raw_token is None:
                return None
            logger.debug("Authenticating request from auth cookie")

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token
