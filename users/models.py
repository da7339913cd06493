"""User model for storefront customers and bakery staff.

Extends Django's `AbstractUser` with a unique, normalized email that
customers sign in with and an optional E.164 phone number. Staff access to
the back office is the standard `is_staff` flag.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models

from common.validators import validate_phone


class User(AbstractUser):
    """Custom user with unique email and optional contact phone.

    Fields:
    - email: the primary email, unique at the database level (normalized).
    - phone: optional contact number, also accepted at sign-in.
    """

    email = models.EmailField(unique=True)
    phone = models.CharField(
        max_length=17,
        blank=True,
        validators=[validate_phone],
        help_text="Contact number, digits with an optional leading +",
    )

    def save(self, *args, **kwargs):
        """Normalize email and phone before persisting.

        Stores the email lowercase without surrounding whitespace so
        uniqueness checks are reliable.
        """
        if self.email:
            self.email = self.email.strip().lower()
        if self.phone:
            self.phone = self.phone.strip()
        super().save(*args, **kwargs)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    class Meta:
        indexes = [
            models.Index(fields=["phone"], name="user_phone_idx"),
        ]
