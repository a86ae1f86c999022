from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth import authenticate
from django.contrib.auth.tokens import default_token_generator
from django.db import transaction
from django.utils.encoding import force_str
from django.utils.http import urlsafe_base64_decode

from config.constants import ROLE_CHOICES, ADMIN_ROLE
from .models import Profile, AdminInvite
from .tasks import send_password_reset_email

User = get_user_model() # AUTH_USER_MODEL = 'users.User'

ROLE_KEYS = [role["key"] for role in ROLE_CHOICES]


class ProfileSerializer(serializers.ModelSerializer):
    """Public view of a Profile. ``id`` is the owning user's id."""
    id = serializers.IntegerField(source="user_id", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Profile
        fields = ['id', 'email', 'full_name', 'role', 'created_at']
        read_only_fields = fields


class UserTableRowSerializer(ProfileSerializer):
    """Profile row for the admin user-management table."""
    can_delete = serializers.SerializerMethodField()

    class Meta(ProfileSerializer.Meta):
        fields = ProfileSerializer.Meta.fields + ['can_delete']
        read_only_fields = fields

    def get_can_delete(self, obj):
        request = self.context.get("request")
        return bool(request and obj.user_id != request.user.pk)


class RegisterSerializer(serializers.Serializer):
    """
    Serializer for user registration with email & password.
    Creates the User and its Profile together. Registering as an admin
    requires an unused invite code issued by an existing admin.
    """
    full_name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.ChoiceField(choices=ROLE_KEYS)
    admin_code = serializers.CharField(write_only=True, required=False, allow_blank=True)

    def validate_full_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Full name is required.")
        return value.strip()

    def validate_email(self, value):
        email = value.lower().strip()
        if User.objects.filter(email=email).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return email

    def validate(self, data):
        if data['role'] == ADMIN_ROLE:
            code = data.get('admin_code')
            if not code or not AdminInvite.objects.filter(code=code, used_at__isnull=True).exists():
                raise serializers.ValidationError({"admin_code": "Invalid admin code"})
        return data

    @transaction.atomic
    def create(self, validated_data):
        """Create the account, its profile and consume the invite in one transaction."""
        invite = None
        if validated_data['role'] == ADMIN_ROLE:
            # Lock the invite so two registrations cannot claim it
            invite = AdminInvite.objects.select_for_update().filter(
                code=validated_data.get('admin_code'), used_at__isnull=True
            ).first()
            if invite is None:
                raise serializers.ValidationError({"admin_code": "Invalid admin code"})

        user = User.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
        )
        Profile.objects.create(
            user=user,
            full_name=validated_data['full_name'],
            role=validated_data['role'],
        )
        if invite is not None:
            invite.claim(user)
        return user


class LoginSerializer(serializers.Serializer):
    """
    Serializer for login using email, password and the role selected on the
    sign-in form.

    - Validates credentials and returns the authenticated user.
    - Rejects valid credentials whose stored role differs from the selected one,
      so a caller never receives a session for the wrong role.
    """
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(choices=ROLE_KEYS)

    def validate(self, data):
        user = authenticate(email=data['email'].lower().strip(), password=data['password'])
        if not user:
            raise serializers.ValidationError({"error": "Invalid email or password. Please try again."})

        profile = user.get_profile()
        if profile is None or profile.role != data['role']:
            raise serializers.ValidationError({"error": f"Invalid credentials for {data['role']} login"})

        return user # Return the authenticated user


class ForgotPasswordSerializer(serializers.Serializer):
    """
    Serializer for handling password reset requests.

    - Validates that the provided email belongs to an account.
    - Queues the email carrying the reset link.
    """
    email = serializers.EmailField()

    def validate_email(self, value):
        email = value.lower().strip()
        user = User.objects.filter(email=email, is_active=True).first()
        if user is None:
            raise serializers.ValidationError("No account found with this email address.")
        self.user = user
        return email

    def save(self, **kwargs):
        send_password_reset_email.delay(self.user.pk)
        return self.user


class ResetPasswordSerializer(serializers.Serializer):
    """
    Serializer for resetting a password from an emailed link.
    The ``uid``/``token`` pair is checked with Django's token generator.
    """
    uid = serializers.CharField()
    token = serializers.CharField()
    new_password = serializers.CharField(write_only=True, min_length=6)

    def validate(self, data):
        try:
            user_id = force_str(urlsafe_base64_decode(data['uid']))
            user = User.objects.get(pk=user_id)
        except (TypeError, ValueError, OverflowError, User.DoesNotExist):
            raise serializers.ValidationError({"error": "Invalid or expired reset link."})

        if not default_token_generator.check_token(user, data['token']):
            raise serializers.ValidationError({"error": "Invalid or expired reset link."})

        data['user'] = user
        return data

    def save(self, **kwargs):
        user = self.validated_data['user']
        user.set_password(self.validated_data['new_password'])
        user.save(update_fields=['password'])
        return user
