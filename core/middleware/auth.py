"""
Admin authentication middleware.

This middleware guards the admin license management API with a
shared secret sent in the ``X-Admin-Secret`` header.
"""

import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.domain.exceptions import AdminAuthenticationError

logger = logging.getLogger(__name__)

ADMIN_PATH_PREFIX = "/api/v1/admin/"


class AdminSecretMiddleware(MiddlewareMixin):
    """
    Middleware for admin API authentication.

    This middleware:
    1. Leaves every path outside /api/v1/admin/ untouched
    2. Compares X-Admin-Secret with ADMIN_SECRET in constant time
    3. Returns 401 Unauthorized if authentication fails
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not request.path.startswith(ADMIN_PATH_PREFIX):
            return None

        try:
            self._authenticate(request.headers.get("X-Admin-Secret", ""))
        except AdminAuthenticationError as e:
            logger.warning(
                "Rejected admin request", extra={"path": request.path, "method": request.method}
            )
            return JsonResponse({"error": {"code": e.code, "message": e.message}}, status=401)
        return None

    def _authenticate(self, provided: str) -> None:
        expected = getattr(settings, "ADMIN_SECRET", "")
        if not expected:
            raise AdminAuthenticationError("Admin API is disabled")
        if not provided or not hmac.compare_digest(provided.encode(), expected.encode()):
            raise AdminAuthenticationError()
