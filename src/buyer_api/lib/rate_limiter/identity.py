"""Caller identity derivation for rate limiting."""

from starlette.requests import Request

USER_ID_HEADER = "X-User-Id"

_DEFAULT_TRUSTED_HEADERS = ["X-Forwarded-For"]


def get_client_ip(request: Request, trusted_headers: list[str] | None = None) -> str:
    """Extract the real client IP from proxy headers or direct connection.

    Checks headers in priority order. For X-Forwarded-For, uses the
    leftmost (client-supplied) IP. Falls back to request.client.host.

    Args:
        request: The incoming Starlette request.
        trusted_headers: Ordered list of header names to check.
            Defaults to ["X-Forwarded-For"].

    Returns:
        The client IP address string, or "unknown" if not determinable.
    """
    headers = trusted_headers if trusted_headers is not None else _DEFAULT_TRUSTED_HEADERS

    for header in headers:
        value = request.headers.get(header, "").strip()
        if not value:
            continue
        # X-Forwarded-For can contain multiple IPs: "client, proxy1, proxy2"
        if header.lower() == "x-forwarded-for":
            return value.split(",")[0].strip() or "unknown"
        return value

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_caller_identity(request: Request, trusted_headers: list[str] | None = None) -> str:
    """Namespaced rate-limit identity: ``user:<id>`` when identified, else ``ip:<address>``."""
    user_id = request.headers.get(USER_ID_HEADER, "").strip()
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_client_ip(request, trusted_headers)}"
