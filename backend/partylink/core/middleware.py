from __future__ import annotations

from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.responses import RedirectResponse

from partylink.auth.jwt_tokens import ACCESS_TOKEN_COOKIE, user_id_from_token
from partylink.core.config import settings

HOST_PREFIX = "/host"


def _is_host_path(path: str) -> bool:
    return path == HOST_PREFIX or path.startswith(HOST_PREFIX + "/")


async def host_session_guard(request: Request, call_next):
    """Bounce signed-out visitors of /host/* to the login screen, keeping where they were going."""
    path = request.url.path
    if _is_host_path(path) and user_id_from_token(request.cookies.get(ACCESS_TOKEN_COOKIE)) is None:
        return RedirectResponse(
            "/login?" + urlencode({"next": path}),
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )
    return await call_next(request)


async def canonical_host_redirect(request: Request, call_next):
    host = (request.headers.get("host") or "").lower()
    if host.startswith("www."):
        apex = settings.CANONICAL_HOST or host[len("www."):].split(":", 1)[0]
        url = f"https://{apex}{request.url.path}"
        if request.url.query:
            url += "?" + request.url.query
        return RedirectResponse(url, status_code=status.HTTP_308_PERMANENT_REDIRECT)
    return await call_next(request)
