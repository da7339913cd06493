"""Password validators registered in ``AUTH_PASSWORD_VALIDATORS``."""

import re

from django.core.exceptions import ValidationError

MAX_PASSWORD_LENGTH = 100


class PasswordComplexityValidator:
    """Require at least one lowercase letter, one uppercase letter and one digit.

    Also caps the length so absurdly long inputs are rejected before hashing.
    """

    message = "Password must contain at least one lowercase letter, one uppercase letter, and one number"

    def __init__(self, max_length: int = MAX_PASSWORD_LENGTH):
        self.max_length = max_length

    def validate(self, password, user=None):
        if len(password) > self.max_length:
            raise ValidationError(
                f"Password must be less than {self.max_length} characters",
                code="password_too_long",
            )
        if not (re.search(r"[a-z]", password) and re.search(r"[A-Z]", password) and re.search(r"\d", password)):
            raise ValidationError(self.message, code="password_too_simple")

    def get_help_text(self):
        return self.message
