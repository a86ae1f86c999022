# users/schemas.py
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, inline_serializer
from rest_framework import serializers

from config.constants import ROLE_CHOICES

ROLE_KEYS = [role["key"] for role in ROLE_CHOICES]

ErrorResponse = inline_serializer(
    name="ErrorResponse",
    fields={"error": serializers.CharField()},
)

# Register schema
register_schema = {
    'operation_id': 'Register',
    'description': """
    Create a new account with full name, email, password and role.

    The account and its profile are created together. Choosing the `admin`
    role requires an unused `admin_code` issued by an existing administrator;
    the code is consumed by the registration.
    """,
    'request': {
        "application/json": inline_serializer(
            name='RegisterRequest',
            fields={
                'full_name': serializers.CharField(required=True, help_text="User's full name"),
                'email': serializers.EmailField(required=True, help_text="User's email address (used for login)"),
                'password': serializers.CharField(required=True, min_length=6, help_text="Password (min 6 characters)"),
                'role': serializers.ChoiceField(choices=ROLE_KEYS, help_text="Requested role"),
                'admin_code': serializers.CharField(required=False, help_text="Invite code, required for the admin role"),
            }
        )
    },
    'responses': {
        201: inline_serializer(
            name='RegistrationSuccess',
            fields={
                'message': serializers.CharField(default="Registration successful! Please log in."),
                'redirect': serializers.CharField(default="/login"),
            }
        ),
        400: ErrorResponse,
    },
    'examples': [
        OpenApiExample(
            'Student Registration',
            value={'full_name': 'Jane Doe', 'email': 'jane@example.com', 'password': 'secure123', 'role': 'student'},
            request_only=True,
        )
    ]
}

# Login schema
login_schema = {
    'operation_id': 'Login',
    'description': """
    Authenticate with email, password and the role selected on the sign-in form.

    Returns a refresh token in the body and sets the access token in an
    HTTP-only cookie. A valid password with a stored role different from the
    selected role is rejected and any existing session cookie is cleared.
    A refresh token from an earlier session may be sent as `refresh`; it is
    blacklisted when the attempt is rejected.
    """,
    'responses': {
        200: OpenApiResponse(
            response=inline_serializer(
                name="LoginSuccess",
                fields={
                    "message": serializers.CharField(default="Login successful"),
                    "refresh": serializers.CharField(),
                    "redirect": serializers.CharField(default="/dashboard"),
                }
            ),
            description="Successful login. Access token is set in HttpOnly Cookie."
        ),
        400: OpenApiResponse(response=ErrorResponse, description="Invalid credentials or role mismatch."),
    },
    "examples": [
        OpenApiExample(
            "Student Login",
            value={"email": "user@example.com", "password": "secure123", "role": "student"},
            request_only=True,
        ),
    ],
}

session_schema = {
    'operation_id': 'Session',
    'description': """
    Current session state and the navigation that goes with it.

    Pass `path` to check a front-end route: when it is protected and nobody is
    signed in, `redirect` names the sign-in route.
    """,
    'responses': {
        200: inline_serializer(
            name="SessionState",
            fields={
                "authenticated": serializers.BooleanField(),
                "user": serializers.DictField(allow_null=True),
                "navigation": serializers.ListField(child=serializers.DictField()),
                "redirect": serializers.CharField(allow_null=True),
            }
        ),
    },
}

me_schema = {
    'operation_id': 'Me',
    'description': "Retrieve the signed-in user's account and profile.",
    'responses': {
        200: inline_serializer(
            name="MeResponse",
            fields={
                "id": serializers.IntegerField(),
                "email": serializers.EmailField(),
                "profile": serializers.DictField(allow_null=True),
            }
        ),
        401: ErrorResponse,
    },
}

logout_schema = {
    'operation_id': 'Logout',
    'description': """
    Sign out. The refresh token is blacklisted when one is supplied and the auth
    cookies are cleared. Always answers 200 so the client can navigate home.
    """,
    'responses': {
        200: inline_serializer(
            name="LogoutSuccess",
            fields={
                "message": serializers.CharField(default="Logged out successfully"),
                "redirect": serializers.CharField(default="/"),
            }
        ),
    },
}

forgot_password_schema = {
    'operation_id': 'ForgotPassword',
    'description': "Send a password reset link to a registered email address.",
    'responses': {
        200: inline_serializer(
            name="ForgotPasswordSuccess",
            fields={"message": serializers.CharField(default="Password reset email sent")}
        ),
        400: ErrorResponse,
    },
}

reset_password_schema = {
    'operation_id': 'ResetPassword',
    'description': "Set a new password using the `uid` and `token` from the reset link.",
    'responses': {
        200: inline_serializer(
            name="ResetPasswordSuccess",
            fields={"message": serializers.CharField(default="Password has been reset")}
        ),
        400: ErrorResponse,
    },
}
