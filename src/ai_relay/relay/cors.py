"""Permissive cross-origin policy: every origin, method and header is allowed."""
from __future__ import annotations

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH", "HEAD"]
EXPOSED_HEADERS = ["Content-Range", "X-Content-Range"]
MAX_AGE = 86400  # 24h


def cors_headers(request: Request) -> dict[str, str]:
    """Headers every response carries; "*" when the caller sent no Origin."""
    origin = request.headers.get("origin")
    headers = {
        "Access-Control-Allow-Origin": origin or "*",
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Expose-Headers": ", ".join(EXPOSED_HEADERS),
    }
    if origin:
        headers["Vary"] = "Origin"
    return headers


def preflight_headers(request: Request) -> dict[str, str]:
    headers = cors_headers(request)
    headers.update({
        "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
        "Access-Control-Allow-Headers": request.headers.get("access-control-request-headers") or "*",
        "Access-Control-Max-Age": str(MAX_AGE),
    })
    return headers


async def answer_preflight(request: Request, call_next):
    """Answer every OPTIONS request with an empty 200, whatever the path.

    Other responses get the CORS headers CORSMiddleware left out, such as
    for requests without an Origin.
    """
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=preflight_headers(request))
    response = await call_next(request)
    for name, value in cors_headers(request).items():
        response.headers.setdefault(name, value)
    return response


def install_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",  # echo the caller's origin so credentials work
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["*"],
        expose_headers=EXPOSED_HEADERS,
        max_age=MAX_AGE,
    )
    # Registered last so it wraps CORSMiddleware and sees OPTIONS first.
    app.middleware("http")(answer_preflight)
