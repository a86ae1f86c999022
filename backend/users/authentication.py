# users/authentication.py
import logging

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

logger = logging.getLogger(__name__)


class CookieJWTAuthentication(JWTAuthentication):
    """
    Resolves the session from the ``Authorization`` header or, failing that,
    from the HttpOnly access token cookie set at login.

    An expired, malformed or orphaned token is treated exactly like no token:
    the request continues anonymously and protected views answer 401.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        try:
            if header is None:
                raw_token = request.COOKIES.get(settings.SIMPLE_JWT["AUTH_COOKIE"]) or None
            else:
                # Raises AuthenticationFailed for "Bearer" or "Bearer a b"
                raw_token = self.get_raw_token(header)

            if raw_token is None:
                return None

            validated_token = self.get_validated_token(raw_token)
            user = self.get_user(validated_token)
        except (InvalidToken, TokenError, AuthenticationFailed) as e:
            logger.debug(f"Ignoring unusable access token: {e}")
            return None

        return user, validated_token


def set_auth_cookie(response, access_token):
    """Store the access token in an HttpOnly cookie on the response."""
    response.set_cookie(
        key=settings.SIMPLE_JWT["AUTH_COOKIE"],
        value=str(access_token),
        httponly=settings.SIMPLE_JWT["AUTH_COOKIE_HTTP_ONLY"],
        secure=settings.SIMPLE_JWT["AUTH_COOKIE_SECURE"],
        samesite=settings.SIMPLE_JWT["AUTH_COOKIE_SAMESITE"],
        max_age=int(settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"].total_seconds()),
    )
    return response


def clear_auth_cookies(response):
    """Expire the access and refresh token cookies."""
    response.delete_cookie(
        settings.SIMPLE_JWT["AUTH_COOKIE"],
        samesite=settings.SIMPLE_JWT["AUTH_COOKIE_SAMESITE"],
    )
    response.delete_cookie(settings.SIMPLE_JWT["REFRESH_COOKIE"])
    return response
