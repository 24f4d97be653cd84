"""FastAPI dependencies for rate limited endpoints.

Use on any endpoint that sends email on behalf of the caller:

    @router.post("/contact", dependencies=[Depends(email_rate_limit)])
    def submit_contact(...):
        ...
"""

from typing import Any, Optional

from fastapi import Request

from .limiter import EmailRateLimiter, get_client_ip


def get_rate_limiter(request: Request) -> EmailRateLimiter:
    """Return the application's EmailRateLimiter (set up in create_app)."""
    return request.app.state.rate_limiter


async def _requested_email(request: Request) -> Optional[str]:
    """Read requesterEmail/email from a JSON body, if there is one."""
    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type:
        return None

    try:
        body: Any = await request.json()
    except ValueError:
        return None

    if not isinstance(body, dict):
        return None

    email = body.get("requesterEmail") or body.get("email")
    return email if isinstance(email, str) else None


async def email_rate_limit(request: Request) -> None:
    """Reject the request with 429 when the per-IP or per-email limit is hit.

    Raises:
        RateLimitExceeded: Rendered as 429 by the application exception handler
    """
    limiter = get_rate_limiter(request)
    client_ip = get_client_ip(
        request.headers,
        request.client.host if request.client else None,
    )
    email = await _requested_email(request)
    limiter.enforce(client_ip, email)
