"""Fixed-window, per-client-IP request limiting backed by the Django cache."""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable

from django.core.cache import cache
from django.http import HttpRequest, HttpResponse, JsonResponse

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."

ViewFunc = Callable[..., HttpResponse]


def client_ip(request: HttpRequest) -> str:
    """Return the client address used as the limiter key."""

    return request.META.get("REMOTE_ADDR") or "unknown"


def window_key(*, scope: str, ip: str, window_seconds: int, now: float | None = None) -> str:
    """Return the cache key for the window containing `now`.

    Args:
        scope: Name distinguishing independently limited endpoints.
        ip: Client address.
        window_seconds: Window length.
        now: Epoch seconds; the current time when omitted.

    Returns:
        A cache key unique to (scope, ip, window index).
    """

    moment = time.time() if now is None else now
    return f"ratelimit:{scope}:{ip}:{int(moment // window_seconds)}"


def hit(key: str, *, window_seconds: int) -> int:
    """Increment the counter stored at `key` and return the new count."""

    cache.add(key, 0, timeout=window_seconds)
    try:
        return cache.incr(key)
    except ValueError:
        # Entry expired between add() and incr().
        cache.set(key, 1, timeout=window_seconds)
        return 1


def rate_limit(max_requests: int, window_seconds: int, *, scope: str | None = None) -> Callable[[ViewFunc], ViewFunc]:
    """Decorate a view so each client IP gets `max_requests` per window.

    Requests beyond the limit receive a 429 JSON response and never reach the
    wrapped view.

    Args:
        max_requests: Allowed requests per window.
        window_seconds: Window length in seconds.
        scope: Counter namespace; defaults to the view's qualified name.

    Returns:
        A view decorator.
    """

    def decorator(view: ViewFunc) -> ViewFunc:
        name = scope or f"{view.__module__}.{view.__qualname__}"

        @functools.wraps(view)
        def wrapped(request: HttpRequest, *args, **kwargs) -> HttpResponse:
            ip = client_ip(request)
            count = hit(window_key(scope=name, ip=ip, window_seconds=window_seconds), window_seconds=window_seconds)
            if count > max_requests:
                logger.warning("Rate limit exceeded: scope=%s ip=%s count=%d", name, ip, count)
                return JsonResponse({"error": RATE_LIMIT_MESSAGE}, status=429)
            return view(request, *args, **kwargs)

        return wrapped

    return decorator
