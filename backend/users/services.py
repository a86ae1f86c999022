# users/services.py
import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from businesses.models import Business
from .models import Profile

logger = logging.getLogger(__name__)


@transaction.atomic
def delete_user_cascade(user_id):
    """
    Remove a user and everything that depends on it: the user's businesses
    (with their canvases), then the profile, then the account.

    All three steps share one transaction, so a failure in any step rolls the
    earlier ones back. Raises ``User.DoesNotExist`` for an unknown id.
    """
    User = get_user_model()
    user = User.objects.select_for_update().get(pk=user_id)

    _, deleted = Business.objects.filter(owner_id=user_id).delete()
    businesses_deleted = deleted.get(Business._meta.label, 0)

    profiles_deleted, _ = Profile.objects.filter(user_id=user_id).delete()

    user.delete()

    logger.info(f"Deleted user {user_id} ({businesses_deleted} business(es), {profiles_deleted} profile)")
    return {
        "businesses": businesses_deleted,
        "profile": profiles_deleted,
        "account": 1,
    }
