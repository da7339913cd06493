"""Scoped throttling shared by the bakery apps.

DRF caches ``THROTTLE_RATES`` on the class at import time; these throttles read
``REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]`` on every request instead so
``override_settings`` in tests takes effect.
"""

from django.conf import settings
from rest_framework.throttling import ScopedRateThrottle


class SettingsScopedRateThrottle(ScopedRateThrottle):
    """Scoped throttle keyed on the user, or the client IP for anonymous callers."""

    def get_rate(self):
        rates = getattr(settings, "REST_FRAMEWORK", {}).get("DEFAULT_THROTTLE_RATES", {})
        return rates.get(self.scope)


class SessionScopedRateThrottle(SettingsScopedRateThrottle):
    """Keys anonymous cart traffic on its stored session.

    Shoppers behind one proxy IP keep separate budgets. The session key
    comes straight from the cookie, so it is only trusted once the session
    store knows it; unknown or forged keys share the client IP budget.
    """

    def get_ident(self, request):
        session = getattr(request, "session", None)
        session_key = getattr(session, "session_key", None)
        if session_key and session.exists(session_key):
            return f"session:{session_key}"
        return super().get_ident(request)
