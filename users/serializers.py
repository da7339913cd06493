"""Serializers for user profile, registration, and sign-in flows.

- UserMeSerializer: profile data for the authenticated user.
- RegistrationSerializer: action serializer that creates customers from the
  storefront sign-up form with strong password validation.
- EmailOrPhoneTokenObtainPairSerializer: obtain JWTs using email or phone.
"""

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

from common.validators import validate_person_name, validate_phone

from .models import User


def split_name(name: str) -> tuple[str, str]:
    """Split a display name into first and last name on the first space."""
    parts = name.strip().split(None, 1)
    first = parts[0] if parts else ""
    last = parts[1] if len(parts) > 1 else ""
    return first, last


class UserMeSerializer(serializers.ModelSerializer):
    """Serializer returning profile fields for the current user."""

    name = serializers.CharField(source="full_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "name", "first_name", "last_name", "phone", "is_staff"]
        read_only_fields = ["id", "email", "is_staff"]


class ProfileUpdateSerializer(serializers.Serializer):
    """Partial update of the signed-in user's name and phone."""

    name = serializers.CharField(min_length=2, max_length=50, required=False, validators=[validate_person_name])
    phone = serializers.CharField(max_length=17, required=False, allow_blank=True, validators=[validate_phone])

    def update(self, instance, validated_data):
        fields = []
        if "name" in validated_data:
            instance.first_name, instance.last_name = split_name(validated_data["name"])
            fields += ["first_name", "last_name"]
        if "phone" in validated_data:
            instance.phone = validated_data["phone"]
            fields.append("phone")
        if fields:
            instance.save(update_fields=fields)
        return instance


class RegistrationSerializer(serializers.Serializer):
    """Action serializer to register a new customer.

    The email doubles as the username. Passwords run through Django's
    validators (including the complexity rule) and must be confirmed; the
    terms must be accepted.
    """

    name = serializers.CharField(
        min_length=2,
        max_length=50,
        validators=[validate_person_name],
        error_messages={
            "min_length": "Name must be at least 2 characters",
            "max_length": "Name must be less than 50 characters",
        },
    )
    email = serializers.EmailField(error_messages={"invalid": "Invalid email address"})
    password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)
    phone = serializers.CharField(max_length=17, required=False, allow_blank=True, validators=[validate_phone])
    terms = serializers.BooleanField()

    def validate_email(self, value: str) -> str:
        """Normalize and ensure the email is unique (case-insensitive)."""
        value = value.strip().lower()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email is already registered.")
        return value

    def validate_terms(self, value: bool) -> bool:
        if value is not True:
            raise serializers.ValidationError("You must accept the terms and conditions")
        return value

    def validate(self, attrs):
        if attrs["password"] != attrs["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords don't match"})
        first, last = split_name(attrs["name"])
        user = User(username=attrs["email"], email=attrs["email"], first_name=first, last_name=last)
        try:
            validate_password(attrs["password"], user=user)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password": list(exc.messages)})
        return attrs

    def create(self, validated_data):
        """Create a new user using secure password hashing."""
        first, last = split_name(validated_data["name"])
        user = User(
            username=validated_data["email"],
            email=validated_data["email"],
            first_name=first,
            last_name=last,
            phone=validated_data.get("phone", ""),
        )
        user.set_password(validated_data["password"])
        user.save()
        return user


class SignOutSerializer(serializers.Serializer):
    """Request body for signing out (blacklisting refresh token)."""

    refresh = serializers.CharField()


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class PasswordResetConfirmSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()
    new_password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        if attrs["new_password"] != attrs["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords don't match"})
        return attrs


class EmailOrPhoneTokenObtainPairSerializer(serializers.Serializer):
    """Obtain JWTs by authenticating with either email or phone.

    Accepts a single `identifier` field which may be an email address
    (case-insensitive) or a phone number, and a `password`.
    Returns `access` and `refresh` tokens on success.
    """

    identifier = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identifier = (attrs.get("identifier") or "").strip()
        password = attrs.get("password") or ""

        if not identifier or not password:
            raise serializers.ValidationError({"detail": "identifier and password are required."})

        user = None
        if "@" in identifier:
            user = User.objects.filter(email=identifier.lower()).first()
        else:
            user = User.objects.filter(phone=identifier).first()

        if not user or not user.check_password(password) or not user.is_active:
            raise serializers.ValidationError({"detail": "Invalid credentials."})

        refresh = RefreshToken.for_user(user)
        return {"access": str(refresh.access_token), "refresh": str(refresh)}
