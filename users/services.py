"""User-related service functions for the password reset workflow.

Builds frontend links and sends the reset email; tokens come from Django's
default password reset token generator.
"""

from typing import Optional
from urllib.parse import urlencode

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.core.mail import send_mail
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode


def build_frontend_url(path: str, query: dict | None = None) -> str:
    """Construct a full frontend URL for the given path and query.

    Reads `FRONTEND_URL` from settings, trims trailing slashes, and
    attaches query parameters for token-based flows.
    """
    base = (getattr(settings, "FRONTEND_URL", None) or "").rstrip("/")
    url = f"{base}{path}"
    if query:
        url = f"{url}?{urlencode(query)}"
    return url


def send_password_reset_email(user):
    """Send a password reset email with uid/token to the user's address."""
    uid = urlsafe_base64_encode(force_bytes(user.pk))
    token = default_token_generator.make_token(user)
    link = build_frontend_url("/auth/reset-password", {"uid": uid, "token": token})
    bakery = getattr(settings, "BAKERY_NAME", "Sweet Dreams Bakery")
    send_mail(
        subject=f"Reset your {bakery} password",
        message=f"Use this link to reset your password: {link}",
        from_email=None,
        recipient_list=[user.email],
    )
    return uid, token


def get_user_from_uid(uidb64: str) -> Optional[object]:
    User = get_user_model()
    try:
        uid = force_str(urlsafe_base64_decode(uidb64))
        return User.objects.get(pk=uid)
    except (TypeError, ValueError, OverflowError, User.DoesNotExist):
        return None
