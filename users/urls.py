"""Account and sign-in routes for storefront customers.

``auth/`` carries the JWT endpoints (sign in, refresh, sign out) and
``account/`` the profile, registration and password reset flows.
"""

from django.urls import include, path

urlpatterns = [
    path("auth/", include("users.auth_urls")),
    path("account/", include("users.account_urls")),
]
