from rest_framework.parsers import JSONParser
from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.generics import GenericAPIView
from rest_framework.exceptions import NotFound, ValidationError
from django.contrib.auth import get_user_model
from django.conf import settings
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError
import logging
from drf_spectacular.utils import extend_schema

from config.constants import LOGIN_ROUTE, DASHBOARD_ROUTE, HOME_ROUTE
from .authentication import set_auth_cookie, clear_auth_cookies
from .models import Profile, AdminInvite
from .navigation import build_navigation, resolve_route
from .permissions import IsAuthenticatedOrRedirect, IsAdminProfile
from .serializers import (
    RegisterSerializer,
    LoginSerializer,
    ForgotPasswordSerializer,
    ResetPasswordSerializer,
    ProfileSerializer,
    UserTableRowSerializer,
)
from .schemas import register_schema, login_schema, session_schema, me_schema, logout_schema, forgot_password_schema, reset_password_schema
from .services import delete_user_cascade


# Get the custom User model
User = get_user_model()

# Setup logger for debugging and tracking requests
logger = logging.getLogger(__name__)


def blacklist_refresh_token(request):
    """Revoke the refresh token sent in the body or cookie, if there is one."""
    body_token = request.data.get("refresh") if hasattr(request.data, "get") else None
    refresh_token = body_token or request.COOKIES.get(settings.SIMPLE_JWT["REFRESH_COOKIE"])
    if not refresh_token:
        return
    try:
        RefreshToken(refresh_token).blacklist()
    except TokenError as e:
        logger.error(f"Failed to blacklist refresh token: {e}")


def serialize_session_user(user):
    """Account plus profile payload for the signed-in user."""
    profile = user.get_profile()
    return {
        "id": user.pk,
        "email": user.email,
        "profile": ProfileSerializer(profile).data if profile else None,
    }


@extend_schema(**register_schema)
class RegisterView(generics.CreateAPIView):
    """
    API for user registration
    """
    permission_classes = [AllowAny]
    parser_classes = [JSONParser]
    serializer_class = RegisterSerializer

    def create(self, request, *args, **kwargs):
        """
        Handles user registration.
        """
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Registered user {user.pk} as {serializer.validated_data['role']}")
        return Response(
            {"message": "Registration successful! Please log in.", "redirect": LOGIN_ROUTE},
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """
    API for user authentication.
    - Returns the refresh token if authentication is successful
    - Stores the access token in HttpOnly Secure Cookie
    - Any failure clears the auth cookies so no half-authenticated state survives
    """
    permission_classes = [AllowAny]
    parser_classes = [JSONParser]

    @extend_schema(request=LoginSerializer, **login_schema)
    def post(self, request):
        """Handles user login requests and generates tokens"""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data # Get authenticated user
        tokens = RefreshToken.for_user(user) # Generate tokens

        logger.info(f"User {user.pk} signed in as {user.profile.role}")
        response = Response({
            "message": "Login successful",
            "refresh": str(tokens), # Return refresh token in response
            "redirect": DASHBOARD_ROUTE,
        }, status=status.HTTP_200_OK)

        # Set JWT access token in HttpOnly Secure Cookie
        return set_auth_cookie(response, tokens.access_token)

    def handle_exception(self, exc):
        response = super().handle_exception(exc)
        if isinstance(exc, ValidationError):
            logger.info("Rejected sign-in attempt")
            # Sign out any earlier session before reporting the failure
            blacklist_refresh_token(self.request)
        return clear_auth_cookies(response)


class SessionView(APIView):
    """
    Single source of truth for "who is signed in".
    Navigation chrome and route guarding on the client both read this.
    """
    permission_classes = [AllowAny]

    @extend_schema(**session_schema)
    def get(self, request):
        user = request.user
        authenticated = bool(user and user.is_authenticated)
        return Response({
            "authenticated": authenticated,
            "user": serialize_session_user(user) if authenticated else None,
            "navigation": build_navigation(user),
            "redirect": resolve_route(request.query_params.get("path"), user),
        })


class UserProfileView(APIView):
    """
    API to get the currently authenticated user's information.
    Requires the user to be logged in (JWT authentication).
    """
    permission_classes = [IsAuthenticatedOrRedirect]

    @extend_schema(**me_schema)
    def get(self, request):
        """
        Retrieves user profile details from the authenticated request.
        """
        return Response(serialize_session_user(request.user))


class LogoutView(APIView):
    """
    API for user logout.
    - Invalidates the refresh token
    - Deletes the access token from HttpOnly Cookie
    """
    permission_classes = [AllowAny]

    @extend_schema(**logout_schema)
    def post(self, request):
        """
        Handles user logout by blacklisting the refresh token.
        Blacklisting failures are logged only: the client navigates home regardless.
        """
        response = Response({"message": "Logged out successfully", "redirect": HOME_ROUTE}, status=status.HTTP_200_OK)
        clear_auth_cookies(response)
        blacklist_refresh_token(request)
        return response


class ForgotPasswordView(GenericAPIView):
    permission_classes = [AllowAny]
    parser_classes = [JSONParser]
    serializer_class = ForgotPasswordSerializer

    @extend_schema(**forgot_password_schema)
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"message": "Password reset email sent"}, status=status.HTTP_200_OK)


class ResetPasswordView(GenericAPIView):
    permission_classes = [AllowAny]
    parser_classes = [JSONParser]
    serializer_class = ResetPasswordSerializer

    @extend_schema(**reset_password_schema)
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"message": "Password has been reset"}, status=status.HTTP_200_OK)


class UserListView(generics.ListAPIView):
    """Admin user-management table: every profile, newest first."""
    permission_classes = [IsAdminProfile]
    serializer_class = UserTableRowSerializer
    pagination_class = None

    def get_queryset(self):
        return Profile.objects.select_related("user").order_by("-created_at")


class UserDeleteView(APIView):
    """
    Delete a user with all dependent records (admin only).
    Admins cannot delete their own account from here.
    """
    permission_classes = [IsAdminProfile]

    def delete(self, request, pk):
        if pk == request.user.pk:
            return Response({"error": "You cannot delete your own account."}, status=status.HTTP_400_BAD_REQUEST)

        try:
            deleted = delete_user_cascade(pk)
        except User.DoesNotExist:
            raise NotFound("User not found")

        logger.info(f"Admin {request.user.pk} deleted user {pk}")
        return Response({"message": "User deleted successfully", "deleted": deleted}, status=status.HTTP_200_OK)


class AdminInviteView(APIView):
    """Issue a single-use code that lets one new user register as admin."""
    permission_classes = [IsAdminProfile]

    def post(self, request):
        invite = AdminInvite.issue(created_by=request.user)
        logger.info(f"Admin {request.user.pk} issued invite {invite.pk}")
        return Response({"code": invite.code, "created_at": invite.created_at}, status=status.HTTP_201_CREATED)
