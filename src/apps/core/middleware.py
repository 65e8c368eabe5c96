"""Custom middleware for the application."""

import logging
import time
import uuid

from django.conf import settings
from django.utils import timezone
from django.utils.deprecation import MiddlewareMixin

from .tasks import record_visit

logger = logging.getLogger(__name__)

VISIT_SESSION_KEY = "visitor_tracked"


def get_client_ip(request):
    """Extract client IP address from request."""
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


class RequestLoggingMiddleware(MiddlewareMixin):
    """Middleware to log request/response information for monitoring.

    Logs:
    - Request method, path and duration
    - Response status code
    - Request ID for tracing (also returned as X-Request-ID)
    - Acting user and role if authenticated
    """

    skip_paths = ("/static/", "/media/", "/favicon.ico")
    sensitive_params = ("password", "token", "secret", "key")

    def process_request(self, request):
        """Add request metadata and start timer."""
        request.start_time = time.time()
        request.request_id = str(uuid.uuid4())[:8]
        return None

    def process_response(self, request, response):
        """Log request completion with timing and response info."""
        if not hasattr(request, "start_time"):
            return response

        if request.path.startswith(self.skip_paths):
            return response

        duration = time.time() - request.start_time

        log_data = {
            "request_id": request.request_id,
            "method": request.method,
            "path": request.path,
            "status_code": response.status_code,
            "duration_ms": round(duration * 1000, 2),
            "ip_address": get_client_ip(request),
            "timestamp": timezone.now().isoformat(),
        }

        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            log_data["user_id"] = str(user.pk)
            log_data["role"] = getattr(user, "role", None)

        if request.method == "GET" and request.GET:
            safe_params = {
                k: v for k, v in request.GET.items() if k not in self.sensitive_params
            }
            if safe_params:
                log_data["query_params"] = safe_params

        if response.status_code >= 500:
            logger.error(f"Request completed: {log_data}")
        elif response.status_code >= 400:
            logger.warning(f"Request completed: {log_data}")
        else:
            logger.info(f"Request completed: {log_data}")

        response["X-Request-ID"] = request.request_id
        return response


class VisitorTrackingMiddleware(MiddlewareMixin):
    """Record one visit per session through the `record_visit` task.

    Tracking is best-effort: a failure is logged at WARNING and the response
    is returned untouched. Requests from clients without a session are
    recorded every time; clients with a session are recorded once.
    """

    def process_request(self, request):
        request._visit_started = time.monotonic()
        return None

    def process_response(self, request, response):
        if not getattr(settings, "VISITOR_TRACKING_ENABLED", True):
            return response
        if not hasattr(request, "_visit_started"):
            return response
        skip_paths = tuple(getattr(settings, "VISITOR_TRACKING_SKIP_PATHS", ()))
        if skip_paths and request.path.startswith(skip_paths):
            return response

        session = getattr(request, "session", None)
        has_session = session is not None and session.session_key is not None
        if has_session and session.get(VISIT_SESSION_KEY):
            return response

        elapsed_ms = int((time.monotonic() - request._visit_started) * 1000)
        user = getattr(request, "user", None)

        try:
            record_visit.delay(
                ip_address=get_client_ip(request),
                url=request.get_full_path(),
                method=request.method,
                user_agent=request.META.get("HTTP_USER_AGENT", ""),
                user_id=str(user.pk) if user is not None and user.is_authenticated else None,
                response_code=response.status_code,
                response_time_ms=elapsed_ms,
            )
            if has_session:
                session[VISIT_SESSION_KEY] = True
        except Exception as e:
            logger.warning(f"Visitor tracking failed: {e}")

        return response
