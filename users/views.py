"""Users app API views.

Endpoints include:
- profile: returns or updates the current authenticated user's profile.
- register: creates a new customer account from the sign-up form.
- password-reset: initiates password reset without revealing account existence.
- password-reset/confirm: validates token and updates password.
- signin / refresh: JWT pair issue and refresh (email or phone sign-in).
- signout: blacklists refresh tokens for JWT logout.
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken, TokenError
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from common.throttling import SettingsScopedRateThrottle

from .logging import log_auth_event
from .serializers import (
    EmailOrPhoneTokenObtainPairSerializer,
    PasswordResetConfirmSerializer,
    PasswordResetRequestSerializer,
    ProfileUpdateSerializer,
    RegistrationSerializer,
    SignOutSerializer,
    UserMeSerializer,
)
from .services import get_user_from_uid, send_password_reset_email

PASSWORD_RESET_SENT = "If the email exists, a reset will be sent."


@extend_schema(
    operation_id="users_current_user",
    summary="Get or update current user profile",
    description=(
        "GET returns the current authenticated user's profile. PATCH updates `name` and `phone`.\n\n"
        "Auth: Requires JWT (Authorization: Bearer <token>) or session auth.\n\n"
        "Errors: 401 if authentication credentials are missing or invalid."
    ),
    tags=["User Endpoints"],
    request=ProfileUpdateSerializer,
    responses={
        200: OpenApiResponse(description="User profile", response=UserMeSerializer),
        401: OpenApiResponse(description="Unauthorized"),
    },
)
@api_view(["GET", "PATCH"])
@permission_classes([IsAuthenticated])
@throttle_classes([SettingsScopedRateThrottle])
def current_user(request):
    """Return or update the authenticated user's profile fields."""
    if request.method == "PATCH":
        serializer = ProfileUpdateSerializer(instance=request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        log_auth_event("profile_update", request, user=request.user)
    return Response(UserMeSerializer(request.user).data)


# Throttle scope for profile endpoint
current_user.throttle_scope = "profile"


@extend_schema(
    tags=["User Endpoints"],
    summary="Register",
    request=RegistrationSerializer,
    responses={201: UserMeSerializer},
    examples=[
        OpenApiExample(
            "Sign up",
            value={
                "name": "Jane Doe",
                "email": "jane@example.com",
                "password": "Sweet1234",
                "confirm_password": "Sweet1234",
                "phone": "+15551234567",
                "terms": True,
            },
            request_only=True,
        )
    ],
)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([SettingsScopedRateThrottle])
def register(request):
    """Register a new customer account."""
    serializer = RegistrationSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        log_auth_event("register", request, user=user, status="success")
        return Response(UserMeSerializer(user).data, status=status.HTTP_201_CREATED)
    log_auth_event("register", request, status="invalid")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Throttle scope for registration
register.throttle_scope = "register"


@extend_schema(tags=["User Endpoints"], summary="Request password reset", request=PasswordResetRequestSerializer)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([SettingsScopedRateThrottle])
def password_reset_request(request):
    """Initiate password reset flow; response is generic to prevent enumeration."""
    serializer = PasswordResetRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    email = serializer.validated_data["email"].strip().lower()
    User = get_user_model()
    user = User.objects.filter(email=email, is_active=True).first()
    if user is None:
        # Do not reveal whether the email exists
        log_auth_event("password_reset_request", request, status="not_found")
        return Response({"detail": PASSWORD_RESET_SENT})

    uid, _ = send_password_reset_email(user)
    log_auth_event("password_reset_request", request, user=user, status="sent", extra={"uid": uid})
    return Response({"detail": PASSWORD_RESET_SENT})


# Throttle scope for password reset request
password_reset_request.throttle_scope = "password_reset"


@extend_schema(tags=["User Endpoints"], summary="Confirm password reset", request=PasswordResetConfirmSerializer)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([SettingsScopedRateThrottle])
def password_reset_confirm(request):
    """Validate password reset token and set a new password."""
    serializer = PasswordResetConfirmSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    user = get_user_from_uid(data["uid"])
    if user is None:
        log_auth_event("password_reset_confirm", request, status="invalid")
        return Response({"detail": "Invalid link."}, status=status.HTTP_400_BAD_REQUEST)

    if not default_token_generator.check_token(user, data["token"]):
        log_auth_event("password_reset_confirm", request, user=user, status="invalid_token")
        return Response({"detail": "Invalid or expired token."}, status=status.HTTP_400_BAD_REQUEST)

    try:
        validate_password(data["new_password"], user=user)
    except DjangoValidationError as e:
        log_auth_event("password_reset_confirm", request, user=user, status="invalid_password")
        return Response({"detail": " ".join(e.messages)}, status=status.HTTP_400_BAD_REQUEST)

    user.set_password(data["new_password"])
    user.save()
    log_auth_event("password_reset_confirm", request, user=user, status="success")
    return Response({"detail": "Password has been reset."})


# Throttle scope for password reset confirm
password_reset_confirm.throttle_scope = "password_reset"


class SignOutView(APIView):
    """Class-based view wrapper for sign-out to align auth view styles."""

    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "signout"
    permission_classes = [AllowAny]

    @extend_schema(tags=["User Endpoints"], request=SignOutSerializer)
    def post(self, request):
        refresh = request.data.get("refresh")
        if not refresh:
            return Response({"detail": "Refresh token is required."}, status=status.HTTP_400_BAD_REQUEST)
        try:
            token = RefreshToken(refresh)
            token.blacklist()
        except TokenError:
            log_auth_event("signout", request, status="invalid_token")
            return Response({"detail": "Invalid token."}, status=status.HTTP_400_BAD_REQUEST)
        log_auth_event("signout", request, status="success")
        return Response({"detail": "Signed out."}, status=status.HTTP_205_RESET_CONTENT)


class SignInView(TokenObtainPairView):
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "signin"
    serializer_class = EmailOrPhoneTokenObtainPairSerializer

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("signin", request, status=status_label)
        return resp


class RefreshView(TokenRefreshView):
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "token_refresh"

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("token_refresh", request, status=status_label)
        return resp
