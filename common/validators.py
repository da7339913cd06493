"""Field validators shared by checkout, order and account serializers."""

from django.core.validators import RegexValidator

PERSON_NAME_REGEX = r"^[a-zA-Z\s'-]+$"
PHONE_REGEX = r"^\+?[1-9]\d{0,15}$"

validate_person_name = RegexValidator(
    PERSON_NAME_REGEX,
    message="Name can only contain letters, spaces, hyphens, and apostrophes",
)
validate_phone = RegexValidator(PHONE_REGEX, message="Invalid phone number")
