# users/tasks.py
from celery import shared_task
from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.core.mail import send_mail
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode
import logging

from config.constants import RESET_PASSWORD_ROUTE

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Reset your Business Showcase password"


def build_reset_link(user):
    uid = urlsafe_base64_encode(force_bytes(user.pk))
    token = default_token_generator.make_token(user)
    return f"{settings.SITE_ORIGIN}{RESET_PASSWORD_ROUTE}?uid={uid}&token={token}"


@shared_task
def send_password_reset_email(user_id):
    """Email a password reset link to the given user."""
    User = get_user_model()
    user = User.objects.filter(pk=user_id, is_active=True).first()
    if user is None:
        logger.warning(f"Password reset requested for missing user {user_id}")
        return False

    body = (
        "We received a request to reset your password.\n\n"
        f"Follow this link to choose a new one:\n{build_reset_link(user)}\n\n"
        "If you did not ask for this, you can ignore this email."
    )
    send_mail(RESET_EMAIL_SUBJECT, body, settings.DEFAULT_FROM_EMAIL, [user.email])
    logger.info(f"Password reset email sent to user {user_id}")
    return True
